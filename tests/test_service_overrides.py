import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from aromasouq.containers import Container
from aromasouq.core.auth_middleware import get_current_user
from aromasouq.core.exceptions import InvalidStatusTransitionError
from aromasouq.main import app
from aromasouq.models.order import OrderStatus
from aromasouq.models.user import UserRole, UserStatus
from aromasouq.schemas.user import User
from aromasouq.schemas.wallet import WalletOverview


def make_current_user(role):
    return User(
        id=f"{role.value.lower()}-1",
        email=f"{role.value.lower()}@example.com",
        first_name="Test",
        last_name="User",
        role=role,
        status=UserStatus.ACTIVE,
    )


class FakeWalletService:
    def __init__(self, db):
        pass

    def get_wallet(self, user_id):
        return WalletOverview(
            id="wallet-1",
            user_id=user_id,
            balance=120,
            lifetime_earned=150,
            lifetime_spent=30,
            available_balance=120,
            coins_expiring_soon=0,
        )


class FakeOrderService:
    def __init__(self, db):
        pass

    def update_status(self, user, order_id, payload):
        raise InvalidStatusTransitionError(
            "order", OrderStatus.PENDING.value, payload.order_status.value
        )


@pytest.fixture
def as_role():
    def _as_role(role):
        app.dependency_overrides[get_current_user] = lambda: make_current_user(role)

    yield _as_role
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def fake_services():
    container: Container = app.container  # type: ignore
    container.services.wallet_service.override(providers.Factory(FakeWalletService))
    container.services.order_service.override(providers.Factory(FakeOrderService))
    yield
    container.services.wallet_service.reset_override()
    container.services.order_service.reset_override()


client = TestClient(app)


def test_wallet_overview(as_role):
    as_role(UserRole.CUSTOMER)

    res = client.get("/api/wallet")

    assert res.status_code == 200
    body = res.json()
    assert body["user_id"] == "customer-1"
    assert body["balance"] == 120


def test_invalid_transition_maps_to_400(as_role):
    as_role(UserRole.ADMIN)

    res = client.patch("/api/orders/order-1/status", json={"order_status": "DELIVERED"})

    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["error"]["code"] == "STATUS_TRANSITION_001"
    assert body["error"]["details"] == {
        "entity": "order",
        "current": "PENDING",
        "requested": "DELIVERED",
    }


def test_admin_routes_reject_customers(as_role):
    as_role(UserRole.CUSTOMER)

    res = client.get("/api/admin/users")

    assert res.status_code == 403
    assert res.json()["error"]["code"] == "AUTH_002"


def test_admin_only_wallet_actions(as_role):
    as_role(UserRole.VENDOR)

    res = client.post("/api/wallet/expire-old-coins")

    assert res.status_code == 403
