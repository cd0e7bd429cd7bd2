from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from aromasouq.config import settings
from aromasouq.core.exceptions import AuthenticationError, AuthorizationError
from aromasouq.database.session import get_db
from aromasouq.models.user import UserRole
from aromasouq.schemas.user import User as UserSchema
from aromasouq.services.auth_service import AuthService

# Bearer is a fallback; browsers send the httpOnly cookie
security = HTTPBearer(auto_error=False)


def _extract_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    token = request.cookies.get(settings.COOKIE_NAME)
    if token:
        return token
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> UserSchema:
    token = _extract_token(request, credentials)
    if not token:
        raise AuthenticationError("Authentication required")
    return AuthService(db, settings=settings).get_current_user(token)


def require_roles(*roles: UserRole):
    """Dependency factory: the caller must hold one of ``roles``."""

    def _require_roles(
        current_user: UserSchema = Depends(get_current_user),
    ) -> UserSchema:
        if current_user.role not in roles:
            raise AuthorizationError(
                f"Requires one of roles: {', '.join(role.value for role in roles)}"
            )
        return current_user

    return _require_roles


require_admin = require_roles(UserRole.ADMIN)
require_vendor = require_roles(UserRole.VENDOR)
require_vendor_or_admin = require_roles(UserRole.VENDOR, UserRole.ADMIN)
