"""Tests for the credential and session store."""
from datetime import timedelta

import pytest

from app.models.session import Session
from app.services.accounts import (
    create_account,
    create_session,
    delete_session,
    get_session,
    purge_expired_sessions,
    verify_login,
)
from app.utils.db import utc_now
from app.utils.exceptions import DuplicateEmailError, InvalidCredentialsError
from app.utils.hashing import hash_password, keys_match, verify_password


class TestHashing:

    def test_hash_is_salted(self):
        first = hash_password("s3cret-password")
        second = hash_password("s3cret-password")
        assert first != second
        assert verify_password("s3cret-password", first)
        assert verify_password("s3cret-password", second)

    def test_wrong_password(self):
        assert not verify_password("nope", hash_password("s3cret-password"))

    def test_malformed_hash(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")

    def test_keys_match(self):
        assert keys_match("abc", "abc")
        assert not keys_match("abc", "abd")


class TestAccounts:

    def test_password_is_not_stored(self, account):
        assert account.password_hash != "correct-horse-battery"
        assert account.password_hash.startswith("$2")

    def test_email_is_normalized(self, db):
        created = create_account(db, " Mixed@Example.COM ", "long-enough-pw", "Max", "Mixed Inc")
        assert created.email == "mixed@example.com"
        assert verify_login(db, "MIXED@example.com", "long-enough-pw").user_id == created.user_id

    def test_duplicate_email(self, db, account):
        with pytest.raises(DuplicateEmailError):
            create_account(db, "owner@example.com", "whatever-pw", "Copy", "Copy Co")

    def test_login_stamps_last_login(self, db, account):
        assert account.last_login is None
        verified = verify_login(db, "owner@example.com", "correct-horse-battery")
        assert verified.last_login is not None

    @pytest.mark.parametrize("email, password", [
        ("owner@example.com", "wrong-password"),
        ("nobody@example.com", "correct-horse-battery"),
    ])
    def test_bad_credentials_look_the_same(self, db, account, email, password):
        with pytest.raises(InvalidCredentialsError) as exc_info:
            verify_login(db, email, password)
        assert exc_info.value.message == "Invalid email or password"


class TestSessions:

    def test_session_valid_until_expiry(self, db, account):
        issued = utc_now()
        session = create_session(db, account.user_id, ttl=timedelta(days=30), now=issued)

        assert get_session(db, session.session_id, now=issued + timedelta(days=29)) is not None
        assert get_session(db, session.session_id, now=issued + timedelta(days=31)) is None

    def test_zero_ttl_is_already_expired(self, db, account):
        issued = utc_now()
        session = create_session(db, account.user_id, ttl=timedelta(0), now=issued)
        token = session.session_id

        assert session.expires_at - session.created_at == timedelta(0)
        assert get_session(db, token, now=issued) is None

    def test_tokens_are_unique(self, db, account):
        first = create_session(db, account.user_id)
        second = create_session(db, account.user_id)
        assert first.session_id != second.session_id
        assert get_session(db, first.session_id) is not None
        assert get_session(db, second.session_id) is not None

    def test_delete_session(self, db, account):
        token = create_session(db, account.user_id).session_id
        delete_session(db, token)
        assert get_session(db, token) is None
        # Unknown ids are a no-op
        delete_session(db, token)

    def test_purge_expired_sessions(self, db, account):
        live = create_session(db, account.user_id)
        create_session(db, account.user_id, ttl=timedelta(days=1), now=utc_now() - timedelta(days=2))

        assert purge_expired_sessions(db) == 1
        remaining = db.query(Session).all()
        assert [s.session_id for s in remaining] == [live.session_id]


class TestPurgeTask:

    @pytest.mark.asyncio
    async def test_purge_sessions_task(self, db, account):
        from app.workers.tasks import purge_sessions

        create_session(db, account.user_id, ttl=timedelta(minutes=5), now=utc_now() - timedelta(hours=1))

        result = await purge_sessions({})

        assert result == {"success": True, "deleted": 1}
        assert db.query(Session).count() == 0

    def test_worker_settings(self):
        from app.workers.config import WorkerSettings
        from app.workers.tasks import purge_sessions

        assert purge_sessions in WorkerSettings.functions
        assert len(WorkerSettings.cron_jobs) == 1
        assert WorkerSettings.redis_settings.port == 6379
