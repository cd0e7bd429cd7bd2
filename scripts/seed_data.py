"""
Seed script: an admin, an approved vendor with a small perfume catalogue,
and a customer. Safe to re-run; existing rows (by email/slug) are kept.
"""

import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from aromasouq.core.security import hash_password
from aromasouq.database.session import get_db_context
from aromasouq.models import (
    Brand,
    Category,
    Product,
    ProductGender,
    ProductVariant,
    User,
    UserRole,
    Vendor,
    VendorStatus,
    Wallet,
)
from aromasouq.utils.timezone_utils import utc_now

DEFAULT_PASSWORD = "ChangeMe123!"

USERS = [
    ("admin@aromasouq.example.com", "Site", "Admin", UserRole.ADMIN),
    ("vendor@aromasouq.example.com", "Oud", "House", UserRole.VENDOR),
    ("customer@aromasouq.example.com", "Layla", "Hassan", UserRole.CUSTOMER),
]

CATEGORIES = [
    ("Oriental", "oriental", 1),
    ("Floral", "floral", 2),
    ("Woody", "woody", 3),
]

BRANDS = [
    ("Oud House", "oud-house"),
    ("Desert Bloom", "desert-bloom"),
]

PRODUCTS = [
    # name, slug, sku, price, stock, category slug, brand slug, gender, concentration
    ("Royal Oud", "royal-oud", "OUD-001", 450.0, 25, "oriental", "oud-house", ProductGender.UNISEX, "EDP"),
    ("Amber Nights", "amber-nights", "OUD-002", 320.0, 40, "oriental", "oud-house", ProductGender.MALE, "EDP"),
    ("Rose of Taif", "rose-of-taif", "DB-001", 180.0, 60, "floral", "desert-bloom", ProductGender.FEMALE, "EDT"),
    ("Cedar Trail", "cedar-trail", "DB-002", 95.0, 80, "woody", "desert-bloom", ProductGender.UNISEX, "EDT"),
]


def _get_or_create_user(db, email, first_name, last_name, role):
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(
            email=email,
            password_hash=hash_password(DEFAULT_PASSWORD),
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
        db.add(user)
        db.flush()
        db.add(Wallet(user_id=user.id))
        print(f"Created {role.value.lower()} {email}")
    return user


def seed():
    with get_db_context() as db:
        users = {row[3]: _get_or_create_user(db, *row) for row in USERS}

        vendor_user = users[UserRole.VENDOR]
        vendor = db.query(Vendor).filter(Vendor.user_id == vendor_user.id).first()
        if vendor is None:
            vendor = Vendor(
                user_id=vendor_user.id,
                business_name="Oud House Trading LLC",
                business_email="vendor@aromasouq.example.com",
                business_phone="+971500000001",
                status=VendorStatus.APPROVED,
                verified_at=utc_now(),
            )
            db.add(vendor)
            db.flush()

        categories = {}
        for name, slug, sort_order in CATEGORIES:
            category = db.query(Category).filter(Category.slug == slug).first()
            if category is None:
                category = Category(name=name, slug=slug, sort_order=sort_order)
                db.add(category)
                db.flush()
            categories[slug] = category

        brands = {}
        for name, slug in BRANDS:
            brand = db.query(Brand).filter(Brand.slug == slug).first()
            if brand is None:
                brand = Brand(name=name, slug=slug)
                db.add(brand)
                db.flush()
            brands[slug] = brand

        created = 0
        for name, slug, sku, price, stock, category_slug, brand_slug, gender, concentration in PRODUCTS:
            if db.query(Product).filter(Product.slug == slug).first() is not None:
                continue
            product = Product(
                name=name,
                slug=slug,
                sku=sku,
                price=price,
                stock=stock,
                category_id=categories[category_slug].id,
                brand_id=brands[brand_slug].id,
                vendor_id=vendor.id,
                gender=gender,
                concentration=concentration,
                size="100ml",
                is_featured=price > 300,
            )
            product.variants.append(
                ProductVariant(name="50ml", sku=f"{sku}-50", price=round(price * 0.6, 2), stock=stock)
            )
            db.add(product)
            created += 1

        print(f"Seeded {created} products for vendor {vendor.business_name}")


if __name__ == "__main__":
    seed()
