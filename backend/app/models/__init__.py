"""Models package."""
from app.models.account import Account
from app.models.session import Session
from app.models.profile import Profile
from app.models.source import Source
from app.models.preference import Preference
from app.models.update import Update
from app.models.webhook_log import WebhookLog

__all__ = ["Account", "Session", "Profile", "Source", "Preference", "Update", "WebhookLog"]
