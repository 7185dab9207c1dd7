"""Tests for the outbound automation webhook."""
import httpx
import pytest

from app.config import settings
from app.constants import WebhookStatus
from app.models.webhook_log import WebhookLog
from app.services.automation_webhook import notify_profile_submission, send_profile_to_automation
from app.utils.exceptions import ExternalServiceError
from app.utils.serialization import load_json

PAYLOAD = {"profile_id": "p-1", "topics": ["AI"]}


def _configured():
    return settings.model_copy(update={"make_webhook_url": "https://hook.example.com/abc"})


class TestSendProfile:

    @pytest.mark.asyncio
    async def test_not_configured(self):
        result = await send_profile_to_automation(PAYLOAD, settings.model_copy(update={"make_webhook_url": None}))
        assert result["status"] == "not_configured"

    @pytest.mark.asyncio
    async def test_success(self):
        received = []

        def handler(request):
            received.append(request)
            return httpx.Response(200, json={"accepted": True})

        result = await send_profile_to_automation(PAYLOAD, _configured(), transport=httpx.MockTransport(handler))

        assert result == {"status": "success", "status_code": 200, "data": {"accepted": True}}
        assert str(received[0].url) == "https://hook.example.com/abc"

    @pytest.mark.asyncio
    async def test_plain_text_reply(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="Accepted"))
        result = await send_profile_to_automation(PAYLOAD, _configured(), transport=transport)
        assert result["data"] == "Accepted"

    @pytest.mark.asyncio
    async def test_rejected(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="scenario off"))
        with pytest.raises(ExternalServiceError) as exc_info:
            await send_profile_to_automation(PAYLOAD, _configured(), transport=transport)
        assert "500" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ExternalServiceError):
            await send_profile_to_automation(PAYLOAD, _configured(), transport=httpx.MockTransport(handler))


class TestNotifyProfileSubmission:

    @pytest.mark.asyncio
    async def test_sent(self, db, account):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))

        status = await notify_profile_submission(db, account.user_id, PAYLOAD, _configured(), transport)

        assert status == "sent"
        log = db.query(WebhookLog).one()
        assert log.status == WebhookStatus.SUCCESS
        assert load_json(log.payload) == PAYLOAD

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, db, account):
        transport = httpx.MockTransport(lambda request: httpx.Response(404, text="no such hook"))

        status = await notify_profile_submission(db, account.user_id, PAYLOAD, _configured(), transport)

        assert status == "pending"
        log = db.query(WebhookLog).one()
        assert log.status == WebhookStatus.FAILED
        assert load_json(log.response)["error"] == "Automation webhook rejected the profile"
