"""
Sign-up, sign-in and session resolution
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidCredentialsError, LegacyAccountError
from app.core.security import create_access_token, decode_access_token, get_password_hash, verify_password
from app.schemas.user import AuthSession, SignUpRequest, UserCreate
from app.services.user_service import UserService, to_public

logger = logging.getLogger(__name__)


class AuthService:
    """Password authentication issuing signed session tokens"""

    @staticmethod
    def sign_up(db: Session, data: SignUpRequest) -> str:
        user_id = UserService.create_user(
            db,
            UserCreate(email=data.email, name=data.name, role=data.role),
            password_hash=get_password_hash(data.password)
        )
        logger.info(f"Sign-up completed for user {user_id}")
        return user_id

    @staticmethod
    def sign_in(db: Session, email: str, password: str) -> AuthSession:
        user = UserService.get_user_record_by_email(db, email)
        if not user:
            logger.warning("Sign-in rejected: unknown email")
            raise InvalidCredentialsError()

        if not user.get("password_hash"):
            logger.warning(f"Sign-in rejected: user {user['id']} has no stored password")
            raise LegacyAccountError()

        if not verify_password(password, user["password_hash"]):
            logger.warning(f"Sign-in rejected: wrong password for user {user['id']}")
            raise InvalidCredentialsError()

        token, expires_at = create_access_token(user["id"], extra={"role": user["role"]})
        return AuthSession(
            user=to_public(user),
            access_token=token,
            expires_at=expires_at.isoformat()
        )

    @staticmethod
    def resolve_session(db: Session, token: str) -> AuthSession:
        """Verify a bearer token and reload its user from the store"""
        payload = decode_access_token(token)
        user = UserService.get_user_by_id(db, payload["sub"])
        if user is None:
            raise InvalidCredentialsError("Session user no longer exists")

        return AuthSession(
            user=user,
            access_token=token,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc).isoformat()
        )