"""Application-wide constants."""

class Frequency:
    """Monitoring frequency values."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class DeliveryMethod:
    """Update delivery method values."""
    EMAIL = "email"
    DASHBOARD = "dashboard"
    SLACK = "slack"


class WebhookType:
    """Webhook log type tags."""
    PROFILE_SUBMISSION = "profile_submission"
    RECEIVE_UPDATES = "receive_updates"


class WebhookStatus:
    """Webhook log status values."""
    SUCCESS = "success"
    FAILED = "failed"


# Session cookie
SESSION_COOKIE_NAME = "session_id"
LOGIN_REDIRECT = "/login"

# Relevance filtering
DEFAULT_RELEVANCE_THRESHOLD = 5
DEFAULT_RELEVANCE_SCORE = 5

# Admin stats
POPULAR_TOPICS_LIMIT = 10
RECENT_PROFILES_LIMIT = 50

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt input limit
