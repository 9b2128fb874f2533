"""Core enumerations shared across the client.

Key Types:
    - ErrorKind: Tag of a normalized error (which failure origin produced it)
    - RefreshMode: When the token manager refreshes the access token
    - SIEType: Export formats of the SIE endpoint
    - TokenState: Validity of the current access token
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Origin of a failure, in classification priority order."""

    THROTTLE = "throttle"
    API = "api"
    HTTP = "http"
    TRANSPORT = "transport"
    AUTH_REFRESH = "auth_refresh"
    RESPONSE_FORMAT = "response_format"
    VALIDATION = "validation"
    OTHER = "other"

    @property
    def retryable(self) -> bool:
        """Whether a caller may retry the same request later."""
        return self in (ErrorKind.THROTTLE, ErrorKind.TRANSPORT)


class RefreshMode(str, Enum):
    """Refresh strategy of the token manager.

    PROACTIVE refreshes inside get_token() once the safety margin is reached.
    ON_DEMAND never refreshes on its own; the caller invokes refresh().
    """

    PROACTIVE = "proactive"
    ON_DEMAND = "on_demand"


class SIEType(str, Enum):
    """SIE export types (1: year-end balances ... 4: transactions)."""

    YEAR_END_BALANCES = "1"
    PERIOD_BALANCES = "2"
    OBJECT_BALANCES = "3"
    TRANSACTIONS = "4"


class TokenState(str, Enum):
    """State of the token manager's access token.

    REVOKED is terminal until the caller installs new credentials.
    """

    VALID = "valid"
    EXPIRED = "expired"
    REVOKED = "revoked"
