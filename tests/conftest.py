"""Shared test fixtures for all test modules."""

import contextlib
import itertools
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.models  # noqa: F401
from storefront.core import database as db_module
from storefront.core.config import settings
from storefront.core.database import Base, get_db
from storefront.core.security import create_access_token, hash_password
from storefront.core.token_blacklist import TokenBlacklist, get_token_blacklist
from storefront.main import app
from storefront.models.order import Order, OrderItem
from storefront.models.payment_card import PaymentCard
from storefront.models.product import Category, Product, ProductVariant
from storefront.models.user import User
from storefront.services.payment_processor import (
    CardDetails,
    ChargeResult,
    PaymentProcessorBase,
    get_payment_processor,
)

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)

# Cheapest bcrypt cost keeps the suite fast
settings.BCRYPT_ROUNDS = 4

TEST_PASSWORD = "correct-horse-battery"


class InMemoryRedis:
    """The subset of the redis client used by the token blacklist."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.store[key] = value
        self.ttls[key] = ex
        return True

    def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if key in self.store)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database. Clears data after each test.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def db_session():
    """Create a database session for direct repository and service testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def session_factory():
    return _TestSessionLocal


@pytest.fixture
def fake_redis():
    return InMemoryRedis()


@pytest.fixture
def blacklist(fake_redis):
    return TokenBlacklist(fake_redis)  # type: ignore[arg-type]


@pytest.fixture
def processor():
    """Processor double: every token is a Visa card and every charge succeeds."""
    intent_ids = itertools.count(1)
    mock = MagicMock(spec=PaymentProcessorBase)
    mock.create_customer.side_effect = lambda email, name, user_id: f"cus_test_{user_id}"
    mock.retrieve_card.side_effect = lambda pm_id: CardDetails(
        payment_method_id=pm_id,
        brand="visa",
        last4="4242",
        exp_month=12,
        exp_year=2030,
        country="IN",
        fingerprint=f"fp_{pm_id}",
        billing_name="Billing Name",
    )
    mock.attach_payment_method.return_value = None
    mock.create_and_confirm_payment.side_effect = lambda **kwargs: ChargeResult(
        payment_intent_id=f"pi_test_{next(intent_ids)}",
        status="succeeded",
        receipt_url="https://pay.stripe.com/receipts/test",
    )
    return mock


@pytest.fixture
def client(blacklist, processor):
    """Test client with Redis and the processor swapped for in-memory doubles."""
    app.dependency_overrides[get_token_blacklist] = lambda: blacklist
    app.dependency_overrides[get_payment_processor] = lambda: processor
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db: Session, email: str = "shopper@example.com", **kwargs) -> User:
    user = User(
        email=email,
        password_hash=hash_password(kwargs.pop("password", TEST_PASSWORD)),
        first_name=kwargs.pop("first_name", "Asha"),
        last_name=kwargs.pop("last_name", "Rao"),
        **kwargs,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_card(db: Session, user: User, token: str, is_default: bool = False) -> PaymentCard:
    card = PaymentCard(
        user_id=user.id,
        processor_payment_method_id=token,
        brand="VISA",
        last4="4242",
        exp_month=12,
        exp_year=2030,
        cardholder_name="Asha Rao",
        is_default=is_default,
    )
    db.add(card)
    db.commit()
    db.refresh(card)
    return card


def make_order(
    db: Session,
    user: User,
    total: str = "100.00",
    payment_status: str = "PENDING",
    status: str = "PENDING",
) -> Order:
    order = Order(
        user_id=user.id,
        total_amount=Decimal(total),
        shipping_address={"line1": "12 MG Road", "city": "Pune"},
        status=status,
        payment_status=payment_status,
        payment_method="CARD",
    )
    order.order_items = [
        OrderItem(
            product_snapshot={"name": "Widget"},
            quantity=1,
            price=Decimal(total),
            subtotal=Decimal(total),
        )
    ]
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def make_product(
    db: Session,
    name: str = "Linen Shirt",
    skus: tuple[str, ...] = ("SHIRT-M",),
    price: str = "499.00",
    category: Category | None = None,
) -> Product:
    product = Product(
        name=name,
        base_price=Decimal(price),
        category_id=category.id if category else None,
    )
    product.variants = [ProductVariant(sku=sku, price=Decimal(price)) for sku in skus]
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@pytest.fixture
def user(db_session):
    return make_user(db_session)


@pytest.fixture
def other_user(db_session):
    return make_user(db_session, email="someone-else@example.com", first_name="Ravi")


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def other_auth_headers(other_user):
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}
