"""Bearer token issuing and validation (JWT, HS256)."""
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
import logging

from jose import JWTError, jwt

from app.core.config import settings
from app.models.user import UserRole
from app.schemas.auth_schemas import TokenData

logger = logging.getLogger(__name__)


class TokenIssuer:
    """Mints and checks signed tokens carrying user id, email, full name and role."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "CarDealershipAPI",
        audience: str = "CarDealershipAPI",
        expire_hours: int = 24,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.expire_hours = expire_hours

    @classmethod
    def from_settings(cls) -> "TokenIssuer":
        return cls(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
            expire_hours=settings.ACCESS_TOKEN_EXPIRE_HOURS,
        )

    def issue(self, user_id: int, email: str, full_name: str, role: UserRole) -> Tuple[str, datetime]:
        """
        Create a JWT access token; returns the token and its expiry (naive UTC)
        """
        now = datetime.now(timezone.utc)
        expire = now + timedelta(hours=self.expire_hours)
        claims = {
            "sub": str(user_id),
            "email": email,
            "name": full_name,
            "role": UserRole(role).value,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "exp": expire,
        }
        token = jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
        return token, expire.replace(tzinfo=None)

    def validate(self, token: str) -> Optional[TokenData]:
        """
        Decode and validate a JWT access token
        """
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
        except JWTError as e:
            logger.info(f"JWT decode error: {str(e)}")
            return None

        try:
            user_id = int(payload.get("sub"))
            role = UserRole(payload.get("role"))
        except (ValueError, TypeError):
            return None

        return TokenData(
            user_id=user_id,
            email=payload.get("email"),
            full_name=payload.get("name"),
            role=role,
        )
