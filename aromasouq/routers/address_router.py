from typing import List

from fastapi import APIRouter, Depends, status

from aromasouq.core.auth_middleware import get_current_user
from aromasouq.deps import get_address_service
from aromasouq.schemas.address import Address, AddressCreate, AddressUpdate
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.user import User as UserSchema
from aromasouq.services.address_service import AddressService

router = APIRouter(prefix="/addresses", tags=["addresses"])


@router.post("", response_model=Address, status_code=status.HTTP_201_CREATED)
def create_address(
    payload: AddressCreate,
    current_user: UserSchema = Depends(get_current_user),
    address_service: AddressService = Depends(get_address_service),
) -> Address:
    return address_service.create(current_user.id, payload)


@router.get("", response_model=List[Address])
def list_addresses(
    current_user: UserSchema = Depends(get_current_user),
    address_service: AddressService = Depends(get_address_service),
) -> List[Address]:
    """Default first, then newest first"""
    return address_service.find_all(current_user.id)


@router.get("/{address_id}", response_model=Address)
def get_address(
    address_id: str,
    current_user: UserSchema = Depends(get_current_user),
    address_service: AddressService = Depends(get_address_service),
) -> Address:
    return address_service.find_one(current_user.id, address_id)


@router.patch("/{address_id}", response_model=Address)
def update_address(
    address_id: str,
    payload: AddressUpdate,
    current_user: UserSchema = Depends(get_current_user),
    address_service: AddressService = Depends(get_address_service),
) -> Address:
    return address_service.update(current_user.id, address_id, payload)


@router.delete("/{address_id}", response_model=MessageResponse)
def delete_address(
    address_id: str,
    current_user: UserSchema = Depends(get_current_user),
    address_service: AddressService = Depends(get_address_service),
) -> MessageResponse:
    return address_service.remove(current_user.id, address_id)


@router.patch("/{address_id}/set-default", response_model=Address)
def set_default_address(
    address_id: str,
    current_user: UserSchema = Depends(get_current_user),
    address_service: AddressService = Depends(get_address_service),
) -> Address:
    return address_service.set_default(current_user.id, address_id)
