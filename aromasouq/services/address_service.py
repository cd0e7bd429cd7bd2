"""
Address book.

Each user with at least one address has exactly one default. Every change to
the default flag (clear the old one, set the new one) runs inside a single
transaction.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from aromasouq.core.exceptions import BadRequestError, NotFoundError
from aromasouq.repositories.address_repository import AddressRepository
from aromasouq.schemas.address import Address, AddressCreate, AddressUpdate
from aromasouq.schemas.common import MessageResponse

logger = logging.getLogger(__name__)


class AddressService:
    def __init__(self, db: Session):
        self.db = db
        self.address_repo = AddressRepository(db)

    def _get_owned(self, user_id: str, address_id: str) -> Address:
        address = self.address_repo.get_by_id(address_id)
        if address is None:
            raise NotFoundError(f"Address with ID {address_id} not found")
        if address.user_id != user_id:
            raise BadRequestError("Address does not belong to user")
        return address

    def create(self, user_id: str, request: AddressCreate) -> Address:
        data = request.model_dump()
        is_first = self.address_repo.count_for_user(user_id) == 0
        requested_default = data.pop("is_default", False)
        make_default = is_first or bool(requested_default)

        try:
            if make_default:
                self.address_repo.clear_defaults(user_id)
            address = self.address_repo.create(
                commit=False, user_id=user_id, is_default=make_default, **data
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Created address {address.id} for user {user_id} (default={make_default})")
        return address

    def find_all(self, user_id: str) -> List[Address]:
        return self.address_repo.list_for_user(user_id)

    def find_one(self, user_id: str, address_id: str) -> Address:
        return self._get_owned(user_id, address_id)

    def update(self, user_id: str, address_id: str, request: AddressUpdate) -> Address:
        current = self._get_owned(user_id, address_id)
        changes = request.model_dump(exclude_unset=True)
        make_default = changes.pop("is_default", None)

        try:
            if make_default and not current.is_default:
                self.address_repo.clear_defaults(user_id, exclude_id=address_id)
                changes["is_default"] = True
            # is_default=false is ignored: the user always keeps one default
            address = self.address_repo.update(address_id, commit=False, **changes)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return address

    def remove(self, user_id: str, address_id: str) -> MessageResponse:
        address = self._get_owned(user_id, address_id)

        try:
            self.address_repo.delete(address_id, commit=False)
            if address.is_default:
                successor = self.address_repo.most_recent_other(user_id, address_id)
                if successor is not None:
                    self.address_repo.update(successor.id, commit=False, is_default=True)
                    logger.info(f"Promoted address {successor.id} to default for user {user_id}")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return MessageResponse(message="Address deleted successfully")

    def set_default(self, user_id: str, address_id: str) -> Address:
        self._get_owned(user_id, address_id)

        try:
            self.address_repo.clear_defaults(user_id, exclude_id=address_id)
            address = self.address_repo.update(address_id, commit=False, is_default=True)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Address {address_id} set as default for user {user_id}")
        return address
