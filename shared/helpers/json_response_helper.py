from typing import Any, Optional

from fastapi import HTTPException, status

from shared.utils.app_status_code import AppStatusCode
from shared.core.schemas import JsonOutResult


def failure_content(message: str, status_code: str = AppStatusCode.OPERATION_FAILED, data: Optional[Any] = None) -> dict:
    """The body every failed request carries."""
    return JsonOutResult(
        data=data,
        status="Failure",
        status_code=str(status_code),
        message=message
    ).model_dump(mode="json")


def success_response(data: Any, message: str = "Success", status_code: str = AppStatusCode.DATA_RETRIEVED_SUCCESSFULLY):
    return JsonOutResult(
        data=data,
        status="Success",
        status_code=status_code,
        message=message
    )


def error_response(message: str, status_code: str = AppStatusCode.OPERATION_FAILED,
                   http_status: int = status.HTTP_400_BAD_REQUEST):
    # raised rather than returned so it works from inside dependencies
    raise HTTPException(
        status_code=http_status,
        detail=failure_content(message, status_code)
    )
