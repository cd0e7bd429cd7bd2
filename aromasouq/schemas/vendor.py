from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from aromasouq.models.vendor import VendorStatus


class VendorProfileCreate(BaseModel):
    business_name: str = Field(..., min_length=3, max_length=200)
    business_email: EmailStr
    business_phone: str = Field(..., min_length=10, max_length=20)
    description: Optional[str] = Field(None, max_length=2000)
    trade_license: Optional[str] = None
    tax_number: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    twitter: Optional[str] = None


class VendorProfileUpdate(BaseModel):
    business_name: Optional[str] = Field(None, min_length=3, max_length=200)
    business_email: Optional[EmailStr] = None
    business_phone: Optional[str] = Field(None, min_length=10, max_length=20)
    description: Optional[str] = Field(None, max_length=2000)
    trade_license: Optional[str] = None
    tax_number: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    twitter: Optional[str] = None


class Vendor(BaseModel):
    id: str
    user_id: str
    business_name: str
    business_email: str
    business_phone: str
    description: Optional[str] = None
    trade_license: Optional[str] = None
    tax_number: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    status: VendorStatus
    verified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VendorStatusUpdate(BaseModel):
    status: VendorStatus


class VendorStatusResult(BaseModel):
    vendor: Vendor
    products_updated: int


class VendorFilter(BaseModel):
    status: Optional[VendorStatus] = None
