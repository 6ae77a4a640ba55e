"""
Exceptions for TradeJournal

Every error a service can raise maps onto one HTTP status code. The API layer
renders them as ``{"success": false, "error": message}``.
"""

from typing import Dict, Optional

from fastapi import status


class JournalError(Exception):
    """Base exception for all TradeJournal errors"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class AuthenticationError(JournalError):
    """No valid session"""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(JournalError):
    """Role or ownership mismatch"""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class ValidationError(JournalError):
    """Missing or invalid input"""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(JournalError):
    """Referenced record does not exist"""

    status_code = status.HTTP_404_NOT_FOUND


class ConfigurationError(JournalError):
    """Server-side configuration is missing"""


class UpstreamError(JournalError):
    """Broker API or token exchange failure

    The upstream body is kept for server-side logging only.
    """

    def __init__(self, message: str, upstream_status: Optional[int] = None, upstream_body: Optional[str] = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
