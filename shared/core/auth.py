from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from shared.utils.app_status_code import AppStatusCode
from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.core.schemas import UserToken

ADMIN_TOKEN_COOKIE = "AccessAdminToken"
EMPLOYEE_TOKEN_COOKIE = "AccessEmployeeToken"

security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_minutes: Optional[int] = None):
    payload = data.copy()
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES)
    payload["exp"] = expires

    # Ensure "name" exists for ledger attribution
    if "name" not in payload and "full_name" in payload:
        payload["name"] = payload["full_name"]

    return jwt.encode(payload, settings.JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> UserToken:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return error_response(
            message="Invalid or expired token",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_EXPIRED),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if not payload.get("user_id"):
        return error_response(
            message="Invalid token structure",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    user = UserToken(**payload)
    if not user.tenant_id:
        return error_response(
            message="Token is not bound to an admin account",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    return user


def validate_current_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
):
    # Bearer header first, then the admin / employee session cookies
    token = credentials.credentials if credentials else (
        request.cookies.get(ADMIN_TOKEN_COOKIE)
        or request.cookies.get(EMPLOYEE_TOKEN_COOKIE)
    )
    if not token:
        return error_response(
            message="You do not have permission to access this resource",
            status_code=str(AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS),
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    return verify_token(token)


def allow_admin(current_user: UserToken = Depends(validate_current_token)):
    if not current_user.is_admin:
        return error_response(
            message="Access forbidden: Admins only",
            status_code=str(AppStatusCode.UNAUTHORIZED_ACTION),
            http_status=status.HTTP_403_FORBIDDEN
        )

    return current_user
