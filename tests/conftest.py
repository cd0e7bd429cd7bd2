import os

# must be set before aromasouq.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from aromasouq.config import get_settings
from aromasouq.core.security import hash_password
from aromasouq.database.session import get_db
from aromasouq.main import app
from aromasouq.models import (
    Address,
    Category,
    Product,
    ProductVariant,
    User,
    UserRole,
    Vendor,
    VendorStatus,
    Wallet,
)
from aromasouq.schemas.user import User as UserSchema

TEST_PASSWORD = "Password123!"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
)

_password_hash = hash_password(TEST_PASSWORD)


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def db_session():
    from aromasouq.models import Base

    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(role=UserRole.CUSTOMER, email=None, balance=0):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            password_hash=_password_hash,
            first_name="Test",
            last_name=f"User{counter['n']}",
            role=role,
        )
        db_session.add(user)
        db_session.flush()
        db_session.add(Wallet(user_id=user.id, balance=0))
        db_session.commit()
        if balance:
            from aromasouq.models.wallet import CoinSource
            from aromasouq.services.wallet_service import WalletService

            WalletService(db_session).award(
                user.id, balance, CoinSource.PROMOTION, "Welcome bonus"
            )
        return UserSchema.model_validate(user)

    return _make_user


@pytest.fixture
def make_vendor(db_session, make_user):
    def _make_vendor(status=VendorStatus.APPROVED):
        user = make_user(role=UserRole.VENDOR)
        vendor = Vendor(
            user_id=user.id,
            business_name=f"{user.last_name} Perfumes",
            business_email=user.email,
            business_phone="+971500000000",
            status=status,
        )
        db_session.add(vendor)
        db_session.commit()
        return user, vendor

    return _make_vendor


@pytest.fixture
def category(db_session):
    category = Category(name="Oriental", slug="oriental")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture
def make_product(db_session, category):
    counter = {"n": 0}

    def _make_product(vendor_id, price=100.0, stock=10, is_active=True, variants=()):
        counter["n"] += 1
        product = Product(
            name=f"Perfume {counter['n']}",
            slug=f"perfume-{counter['n']}",
            sku=f"SKU-{counter['n']:04d}",
            price=price,
            stock=stock,
            category_id=category.id,
            vendor_id=vendor_id,
            is_active=is_active,
        )
        for index, (variant_price, variant_stock) in enumerate(variants):
            product.variants.append(
                ProductVariant(
                    name=f"{50 * (index + 1)}ml",
                    sku=f"SKU-{counter['n']:04d}-V{index}",
                    price=variant_price,
                    stock=variant_stock,
                )
            )
        db_session.add(product)
        db_session.commit()
        return product

    return _make_product


@pytest.fixture
def make_address(db_session):
    def _make_address(user_id, is_default=True):
        address = Address(
            user_id=user_id,
            full_name="Layla Hassan",
            phone="+971501234567",
            address_line1="12 Al Wasl Road",
            city="Dubai",
            state="Dubai",
            country="UAE",
            zip_code="00000",
            is_default=is_default,
        )
        db_session.add(address)
        db_session.commit()
        return address

    return _make_address
