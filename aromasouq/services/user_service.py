import logging
from typing import Optional

from sqlalchemy.orm import Session

from aromasouq.config import Settings, get_settings
from aromasouq.core.exceptions import BadRequestError, NotFoundError
from aromasouq.core.security import hash_password, verify_password
from aromasouq.repositories.user_repository import UserRepository
from aromasouq.repositories.wallet_repository import WalletRepository
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.pagination import Page
from aromasouq.schemas.user import (
    ChangePasswordRequest,
    User,
    UserProfile,
    UserProfileUpdate,
)
from aromasouq.schemas.wallet import CoinTransaction

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.user_repo = UserRepository(db)
        self.wallet_repo = WalletRepository(db)

    def get_profile(self, user_id: str) -> UserProfile:
        profile = self.user_repo.get_profile(user_id)
        if profile is None:
            raise NotFoundError("User not found")
        return profile

    def update_profile(self, user_id: str, request: UserProfileUpdate) -> User:
        changes = request.model_dump(exclude_unset=True)
        user = self.user_repo.update(user_id, **changes)
        if user is None:
            raise NotFoundError("User not found")
        logger.info(f"Updated profile for user {user_id}: {sorted(changes)}")
        return user

    def change_password(
        self, user_id: str, request: ChangePasswordRequest
    ) -> MessageResponse:
        current_hash = self.user_repo.get_password_hash(user_id)
        if current_hash is None:
            raise NotFoundError("User not found")

        if not verify_password(request.current_password, current_hash):
            raise BadRequestError("Current password is incorrect")

        self.user_repo.update(user_id, password_hash=hash_password(request.new_password))
        logger.info(f"Password changed for user {user_id}")
        return MessageResponse(message="Password changed successfully")

    def get_coins_history(self, user_id: str, page: int, limit: int) -> Page[CoinTransaction]:
        entries, total = self.wallet_repo.list_transactions(user_id, page, limit)
        return Page[CoinTransaction].build(entries, total, page, limit)
