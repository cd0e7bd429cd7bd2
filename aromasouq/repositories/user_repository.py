from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from aromasouq.models.user import User as UserModel
from aromasouq.repositories.base import BaseRepository
from aromasouq.schemas.user import User, UserFilter, UserProfile, UserWithPassword


class UserRepository(BaseRepository[UserModel, User]):
    def __init__(self, db: Session):
        super().__init__(UserModel, User, db)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.get_by_field("email", email.lower())

    def get_with_password(self, email: str) -> Optional[UserWithPassword]:
        instance = (
            self.db.query(UserModel).filter(UserModel.email == email.lower()).first()
        )
        if instance is None:
            return None
        return UserWithPassword.model_validate(instance)

    def get_password_hash(self, user_id: str) -> Optional[str]:
        instance = self._get_model(user_id)
        return instance.password_hash if instance else None

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        instance = self._get_model(user_id)
        if instance is None:
            return None
        return UserProfile.model_validate(instance)

    def email_exists(self, email: str) -> bool:
        return self.exists({"email": email.lower()})

    def search(self, filters: UserFilter, page: int, limit: int) -> Tuple[List[User], int]:
        query = self.db.query(UserModel)
        if filters.role is not None:
            query = query.filter(UserModel.role == filters.role)
        if filters.status is not None:
            query = query.filter(UserModel.status == filters.status)
        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.filter(
                or_(
                    UserModel.email.ilike(pattern),
                    UserModel.first_name.ilike(pattern),
                    UserModel.last_name.ilike(pattern),
                )
            )
        return self.paginate(query.order_by(UserModel.created_at.desc()), page, limit)
