"""Tests for admin aggregation."""
from app.config import settings
from app.services.admin_stats import get_admin_stats
from app.services.profiles import create_profile
from app.utils.db import transaction


def _seed(db, user_id):
    rows = [
        (["AI", "Cloud"], "daily", 50),
        (["AI", "Cloud"], "weekly", 26),
        (["Shipping"], "weekly", 20),
    ]
    with transaction(db):
        for topics, frequency, price in rows:
            create_profile(db, user_id, "Seeded business", topics, frequency, "email", price)


class TestAdminStats:

    def test_empty_database(self, db):
        stats, profiles = get_admin_stats(db)
        assert stats.total_accounts == 0
        assert stats.total_profiles == 0
        assert stats.total_mrr == 0
        assert stats.average_price == 0
        assert stats.frequency_breakdown == []
        assert stats.popular_topics == []
        assert profiles == []

    def test_rollups(self, db, account, other_account):
        _seed(db, account.user_id)

        stats, profiles = get_admin_stats(db)

        assert stats.total_accounts == 2
        assert stats.total_profiles == 3
        assert stats.total_mrr == 96
        assert stats.average_price == 32
        assert {(f.frequency, f.count) for f in stats.frequency_breakdown} == {("daily", 1), ("weekly", 2)}
        assert (stats.popular_topics[0].topics, stats.popular_topics[0].count) == ("AI, Cloud", 2)
        assert len(profiles) == 3

    def test_top_n(self, db, account):
        _seed(db, account.user_id)
        stats, _ = get_admin_stats(db, top_n=1, recent=2)
        assert len(stats.popular_topics) == 1


class TestAdminEndpoint:

    def test_stats(self, client, db, account):
        _seed(db, account.user_id)

        response = client.get("/api/admin/stats")
        assert response.status_code == 200
        body = response.json()
        assert body["stats"]["total_profiles"] == 3
        assert len(body["recent_profiles"]) == 3

    def test_admin_key(self, client, monkeypatch):
        monkeypatch.setattr(settings, "admin_api_key", "admin-secret")

        assert client.get("/api/admin/stats").status_code == 401
        assert client.get("/api/admin/stats", headers={"X-Admin-Key": "nope"}).status_code == 403
        assert client.get("/api/admin/stats", headers={"X-Admin-Key": "admin-secret"}).status_code == 200
