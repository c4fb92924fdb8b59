from datetime import datetime, timedelta
from typing import Optional, Union
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError as PayloadError
import logging

from ..core.security import TokenPayload, TokenState, UserRole

logger = logging.getLogger(__name__)

class TokenService:
    """Issues and checks role-scoped bearer tokens.

    A token is an HS256 JWT binding an identity (``email``) to a ``role`` with
    an expiry. Nothing is stored server side; the signing configuration is
    fixed when the service is constructed.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    def issue(self, email: str, role: Union[UserRole, str] = UserRole.PATIENT) -> str:
        """Create a signed token for ``email`` acting as ``role``."""
        role = UserRole(role)
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)
        to_encode = {
            "email": email,
            "role": role.value,
            "exp": expire,
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> Optional[TokenPayload]:
        """Return the payload of a valid token, or None."""
        state, payload = self._decode(token)
        return payload if state == TokenState.VALID else None

    def inspect(self, token: str) -> TokenState:
        state, _ = self._decode(token)
        return state

    def validate(self, token: str, required_role: Union[UserRole, str]) -> bool:
        """True only for a well-formed, unexpired token issued for ``required_role``."""
        payload = self.decode(token)
        if payload is None:
            return False
        return payload.role == UserRole(required_role).value

    def extract_email(self, token: str) -> Optional[str]:
        payload = self.decode(token)
        return payload.email if payload else None

    def _decode(self, token: str):
        if not token:
            return TokenState.INVALID, None
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            logger.info("Rejected expired token")
            return TokenState.EXPIRED, None
        except JWTError:
            return TokenState.INVALID, None

        try:
            payload = TokenPayload(**claims)
        except PayloadError:
            return TokenState.INVALID, None

        if not payload.email or payload.role not in {role.value for role in UserRole}:
            return TokenState.INVALID, None
        return TokenState.VALID, payload
