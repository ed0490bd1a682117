"""HTTP error mapping

ClientError carries a use-case Error to the exception handler registered
in create_app, which renders it as {"error": {"code", "message"}}.
"""

from typing import Dict, Optional
from fastapi import status
from libs.result import Error
from src.app.use_cases.monetization import errors

ERROR_STATUS: Dict[str, int] = {
    errors.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    errors.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    errors.INVALID_STATE: status.HTTP_409_CONFLICT,
    errors.PAYMENT_FAILED: status.HTTP_402_PAYMENT_REQUIRED,
    errors.PAYMENT_TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
}


def status_for(error: Error) -> int:
    if error.code in errors.NOT_FOUND_CODES:
        return status.HTTP_404_NOT_FOUND
    if error.code in ERROR_STATUS:
        return ERROR_STATUS[error.code]
    # <OPERATION>_FAILED and anything unexpected
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class ClientError(Exception):
    def __init__(
        self,
        error: Error,
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_for(error)
        self.headers = headers

    def to_dict(self) -> dict:
        return {"error": {"code": self.error.code, "message": self.error.message}}
