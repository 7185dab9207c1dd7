"""Tests for the profile repository and profile endpoints."""
import uuid

import httpx
import pytest
from pydantic import ValidationError

from app.config import settings
from app.constants import WebhookStatus, WebhookType
from app.models.preference import Preference
from app.models.profile import Profile
from app.models.source import Source
from app.models.webhook_log import WebhookLog
from app.schemas.profile import SubmitProfileRequest
from app.services import automation_webhook
from app.services.profiles import (
    create_profile,
    get_owned_profile,
    get_profile_sources,
    get_user_sources,
    save_preferences,
    save_sources,
    submit_profile,
)
from app.utils.db import transaction
from app.utils.exceptions import ForbiddenError, InvalidInputError, StorageError
from app.utils.serialization import load_json


def _profile(db, user_id, **overrides):
    values = {
        "business_description": "Craft brewery",
        "topics": ["Alcohol licensing", "Hops prices"],
        "frequency": "monthly",
        "delivery_method": "dashboard",
        "price": 15,
    }
    values.update(overrides)
    with transaction(db):
        profile = create_profile(db, user_id, **values)
    return profile


class TestProfileRepository:

    def test_topics_are_joined(self, db, account):
        profile = _profile(db, account.user_id)
        assert profile.topics == "Alcohol licensing, Hops prices"
        assert profile.topic_list == ["Alcohol licensing", "Hops prices"]

    def test_unknown_account(self, db):
        with pytest.raises(StorageError):
            _profile(db, uuid.uuid4())
        assert db.query(Profile).count() == 0

    def test_sources_keep_submission_order(self, db, account):
        profile = _profile(db, account.user_id)
        with transaction(db):
            save_sources(db, profile.id, [
                {"name": "Third", "url": "https://c.example.com"},
                {"name": "First", "url": "https://a.example.com", "suggested_by_ai": True},
                {"name": "Rejected", "url": "https://x.example.com", "approved": False},
            ])

        sources = get_profile_sources(db, profile.id)
        assert [s.name for s in sources] == ["Third", "First"]
        assert [s.display_order for s in sources] == [0, 1]
        assert sources[1].suggested_by_ai is True

    def test_empty_source_list(self, db, account):
        profile = _profile(db, account.user_id)
        with transaction(db):
            assert save_sources(db, profile.id, []) == []
        assert get_profile_sources(db, profile.id) == []

    def test_sources_for_unknown_profile_leave_nothing(self, db, account):
        with pytest.raises(StorageError):
            with transaction(db):
                save_sources(db, uuid.uuid4(), [{"name": "A", "url": "https://a.example.com"}])
        assert db.query(Source).count() == 0

    def test_preferences_upsert_keeps_one_row(self, db, account):
        profile = _profile(db, account.user_id)
        with transaction(db):
            save_preferences(db, profile.id, relevance_threshold=3)
        with transaction(db):
            stored = save_preferences(db, profile.id, relevance_threshold=8, keyword_alerts="recall")

        assert db.query(Preference).count() == 1
        assert stored.relevance_threshold == 8
        assert stored.keyword_alerts == "recall"
        assert stored.competitor_urls == ""

    def test_preferences_for_unknown_profile(self, db):
        with pytest.raises(StorageError):
            with transaction(db):
                save_preferences(db, uuid.uuid4())

    def test_owned_profile_check(self, db, account, other_account):
        profile = _profile(db, account.user_id)
        assert get_owned_profile(db, profile.id, account.user_id).id == profile.id
        assert get_owned_profile(db, uuid.uuid4(), account.user_id) is None
        with pytest.raises(ForbiddenError):
            get_owned_profile(db, profile.id, other_account.user_id)

    def test_user_sources_span_profiles(self, db, account):
        first = _profile(db, account.user_id)
        second = _profile(db, account.user_id, business_description="Second")
        with transaction(db):
            save_sources(db, first.id, [{"name": "Old", "url": "https://old.example.com"}])
            save_sources(db, second.id, [{"name": "New", "url": "https://new.example.com"}])

        assert [s.name for s in get_user_sources(db, account.user_id)] == ["New", "Old"]


class TestSubmitProfile:

    def test_submit_is_priced_and_stored(self, db, account, profile_payload):
        request = SubmitProfileRequest(**profile_payload())
        profile, pricing = submit_profile(db, account.user_id, request)

        assert pricing.total == 24
        assert profile.price == 24
        assert len(get_profile_sources(db, profile.id)) == 2
        preferences = db.query(Preference).filter(Preference.profile_id == profile.id).one()
        assert preferences.relevance_threshold == 6
        assert preferences.competitor_urls == "https://rival.example.com"

    def test_invalid_frequency_writes_nothing(self, db, account, profile_payload):
        request = SubmitProfileRequest(**profile_payload(frequency="hourly"))
        with pytest.raises(InvalidInputError):
            submit_profile(db, account.user_id, request)
        assert db.query(Profile).count() == 0

    def test_topics_string_is_split(self, profile_payload):
        request = SubmitProfileRequest(**profile_payload(topics="a, b ,,c"))
        assert request.topics == ["a", "b", "c"]

    def test_list_topic_with_comma_is_rejected(self, profile_payload):
        with pytest.raises(ValidationError):
            SubmitProfileRequest(**profile_payload(topics=["Mergers, acquisitions"]))


class TestProfileEndpoints:

    def test_requires_session(self, client, profile_payload):
        response = client.post("/api/submit-profile", json=profile_payload())
        assert response.status_code == 401
        assert response.json()["redirect"] == "/login"

    def test_submit_profile(self, auth_client, db, account, profile_payload):
        response = auth_client.post("/api/submit-profile", json=profile_payload())
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["user_id"] == str(account.user_id)
        assert body["pricing"]["total"] == 24
        assert body["make_status"] == "pending"

        log = db.query(WebhookLog).filter(WebhookLog.webhook_type == WebhookType.PROFILE_SUBMISSION).one()
        assert log.status == WebhookStatus.SUCCESS
        assert load_json(log.payload)["profile_id"] == body["profile_id"]
        assert load_json(log.response)["status"] == "not_configured"

    def test_submit_rejects_bad_delivery(self, auth_client, db, profile_payload):
        response = auth_client.post("/api/submit-profile", json=profile_payload(delivery_method="pigeon"))
        assert response.status_code == 400
        assert db.query(Profile).count() == 0

    def test_submit_requires_topics(self, auth_client, profile_payload):
        response = auth_client.post("/api/submit-profile", json=profile_payload(topics=[]))
        assert response.status_code == 400

    def test_profile_detail(self, auth_client, profile_payload):
        profile_id = auth_client.post("/api/submit-profile", json=profile_payload()).json()["profile_id"]

        response = auth_client.get(f"/api/profile/{profile_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["profile"]["topics"] == ["FDA cold chain rules", "Logistics market"]
        assert [s["name"] for s in body["sources"]] == ["FDA", "Supply Chain Dive"]
        assert body["preferences"]["relevance_threshold"] == 6

    def test_profile_of_another_account(self, auth_client, db, other_account):
        profile = _profile(db, other_account.user_id)
        response = auth_client.get(f"/api/profile/{profile.id}")
        assert response.status_code == 403

    def test_unknown_profile(self, auth_client):
        response = auth_client.get(f"/api/profile/{uuid.uuid4()}")
        assert response.status_code == 404

    def test_update_preferences(self, auth_client, db, profile_payload):
        profile_id = auth_client.post("/api/submit-profile", json=profile_payload()).json()["profile_id"]

        response = auth_client.put(
            f"/api/profile/{profile_id}/preferences",
            json={"relevance_threshold": 9, "keyword_alerts": "recall"},
        )
        assert response.status_code == 200
        assert response.json()["relevance_threshold"] == 9
        assert response.json()["competitor_urls"] == ""
        assert db.query(Preference).count() == 1

    def test_user_listings(self, auth_client, profile_payload):
        auth_client.post("/api/submit-profile", json=profile_payload())

        profiles = auth_client.get("/api/user/profiles").json()
        assert profiles["count"] == 1
        sources = auth_client.get("/api/user/sources").json()
        assert sources["count"] == 2

    def test_submit_rejects_comma_in_topic(self, auth_client, db, profile_payload):
        response = auth_client.post("/api/submit-profile", json=profile_payload(topics=["Mergers, acquisitions"]))
        assert response.status_code == 400
        assert db.query(Profile).count() == 0

    def test_webhook_runs_outside_transaction(self, auth_client, db, profile_payload, monkeypatch):
        seen = []

        async def fake_notify(session, user_id, payload, *args, **kwargs):
            seen.append(session.in_transaction())
            return "sent"

        monkeypatch.setattr("app.api.profiles.notify_profile_submission", fake_notify)

        response = auth_client.post("/api/submit-profile", json=profile_payload())
        assert response.status_code == 200
        assert response.json()["make_status"] == "sent"
        assert seen == [False]

    def test_failed_webhook_keeps_profile(self, auth_client, db, profile_payload, monkeypatch):
        configured = settings.model_copy(update={"make_webhook_url": "https://hook.example.com/abc"})
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="scenario off"))

        async def failing_notify(session, user_id, payload):
            return await automation_webhook.notify_profile_submission(
                session, user_id, payload, settings=configured, transport=transport,
            )

        monkeypatch.setattr("app.api.profiles.notify_profile_submission", failing_notify)

        response = auth_client.post("/api/submit-profile", json=profile_payload())
        assert response.status_code == 200
        assert response.json()["make_status"] == "pending"
        assert db.query(Profile).count() == 1

        log = db.query(WebhookLog).filter(WebhookLog.webhook_type == WebhookType.PROFILE_SUBMISSION).one()
        assert log.status == WebhookStatus.FAILED
        assert "500" in load_json(log.response)["details"]
