"""Centralized defaults for enums and singleton settings."""

from app.db.enums.commissions import CommissionStatus


DEFAULT_COMMISSION_STATUS: CommissionStatus = CommissionStatus.PENDING
DEFAULT_CLIENT_NAME = "Anonymous"

# Used when the settings row has not been created yet (fail open)
DEFAULT_COMMISSIONS_OPEN = True
DEFAULT_QUEUE_LIMIT = 200
