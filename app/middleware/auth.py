"""Authentication dependencies: bearer token to User, plus role guards"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.dependencies import get_db, get_token_issuer
from app.errors.exceptions import ForbiddenException, UnauthorizedException
from app.models.user import User, UserRole
from app.services.auth_service import get_user_by_id
from app.services.token_service import TokenIssuer

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> User:
    """Get current authenticated user from JWT token"""
    if credentials is None:
        raise UnauthorizedException(detail="Not authenticated")

    token_data = issuer.validate(credentials.credentials)
    if token_data is None or token_data.user_id is None:
        raise UnauthorizedException(detail="Could not validate credentials")

    user = get_user_by_id(db, user_id=token_data.user_id)

    if user is None:
        raise UnauthorizedException(detail="User not found")

    if not user.is_active:
        raise ForbiddenException(detail="Inactive user")

    return user


def require_role(required_role: UserRole):
    """Dependency that only lets users with exactly *required_role* through"""
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != required_role:
            raise ForbiddenException(
                detail=f"Insufficient permissions. Required role: {required_role.value}"
            )
        return current_user
    return role_checker


require_admin = require_role(UserRole.ADMIN)
