import logging
from typing import Optional

from sqlalchemy.orm import Session

from aromasouq.config import Settings, get_settings
from aromasouq.core.exceptions import AuthenticationError, ConflictError
from aromasouq.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from aromasouq.models.user import UserRole, UserStatus
from aromasouq.repositories.user_repository import UserRepository
from aromasouq.repositories.wallet_repository import WalletRepository
from aromasouq.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, TokenPayload
from aromasouq.schemas.user import User

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, login and JWT resolution"""

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.user_repo = UserRepository(db)
        self.wallet_repo = WalletRepository(db)

    def _issue_token(self, user: User) -> str:
        payload = TokenPayload(sub=user.id, email=user.email, role=user.role)
        return create_access_token(payload.model_dump(mode="json"), settings=self.settings)

    def register(self, request: RegisterRequest) -> AuthResponse:
        email = request.email.lower()
        if self.user_repo.email_exists(email):
            raise ConflictError("User with this email already exists")

        # ADMIN accounts are never self-registered
        role = request.role or UserRole.CUSTOMER
        if role == UserRole.ADMIN:
            role = UserRole.CUSTOMER

        try:
            user = self.user_repo.create(
                commit=False,
                email=email,
                password_hash=hash_password(request.password),
                first_name=request.first_name,
                last_name=request.last_name,
                phone=request.phone,
                role=role,
                status=UserStatus.ACTIVE,
            )
            self.wallet_repo.get_or_create(user.id, commit=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Registered user {user.id} with role {user.role.value}")
        return AuthResponse(user=user, access_token=self._issue_token(user))

    def login(self, request: LoginRequest) -> AuthResponse:
        record = self.user_repo.get_with_password(request.email)
        if record is None or not verify_password(request.password, record.password_hash):
            logger.warning(f"Failed login for {request.email}")
            raise AuthenticationError("Invalid credentials")

        if record.status != UserStatus.ACTIVE:
            raise AuthenticationError("Account is not active")

        user = User.model_validate(record.model_dump(exclude={"password_hash"}))
        return AuthResponse(user=user, access_token=self._issue_token(user))

    def get_current_user(self, token: str) -> User:
        payload = decode_access_token(token, settings=self.settings)
        user_id = payload.get("sub")
        if not user_id:
            raise AuthenticationError("Invalid token payload")

        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise AuthenticationError("User not found")
        if user.status != UserStatus.ACTIVE:
            raise AuthenticationError("Account is not active")
        return user
