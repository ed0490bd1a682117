"""Error codes returned by monetization use cases

Grouped by kind; the HTTP layer maps kinds to status codes.
"""

from libs.result import Error

VALIDATION_ERROR = "VALIDATION_ERROR"

TRANSACTION_NOT_FOUND = "TRANSACTION_NOT_FOUND"
TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
ARTIST_NOT_FOUND = "ARTIST_NOT_FOUND"
SOURCE_NOT_FOUND = "SOURCE_NOT_FOUND"

FORBIDDEN = "FORBIDDEN"
INVALID_STATE = "INVALID_STATE"
PAYMENT_FAILED = "PAYMENT_FAILED"
PAYMENT_TIMEOUT = "PAYMENT_TIMEOUT"

NOT_FOUND_CODES = frozenset({
    TRANSACTION_NOT_FOUND,
    TICKET_NOT_FOUND,
    EVENT_NOT_FOUND,
    ARTIST_NOT_FOUND,
    SOURCE_NOT_FOUND,
})


def validation_error(message: str, reason: str = None) -> Error:
    return Error(code=VALIDATION_ERROR, message=message, reason=reason)


def forbidden(message: str = "You don't have permission to perform this action") -> Error:
    return Error(code=FORBIDDEN, message=message)


def invalid_state(message: str, reason: str = None) -> Error:
    return Error(code=INVALID_STATE, message=message, reason=reason)
