import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_123")

from datetime import time
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pizza_mvp.db.base import Base
from pizza_mvp.db.deps import get_checkout_gateway, get_email_service
from pizza_mvp.db.session import get_async_session
from pizza_mvp.main import app
from pizza_mvp.models import Ingredient, Location, MenuItem, OpeningHours
from pizza_mvp.services.email import render_order_confirmation
from pizza_mvp.services.payments import StripeCheckoutGateway


class FakeEmailService:
    def __init__(self, enabled=True, fail=False):
        self.enabled = enabled
        self.fail = fail
        self.sent = []

    async def send_order_confirmation(self, order, items):
        # рендер требует полностью загруженного графа заказа
        body = render_order_confirmation(order, items)
        if self.fail:
            raise ConnectionRefusedError("SMTP server unreachable")
        self.sent.append({"order_id": order.id, "to": order.email, "body": body})


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def catalog(session_factory):
    """
    Две точки (одна неактивна), два блюда, три ингредиента.
    Main Street открыта ежедневно 11:00–22:00.
    """
    async with session_factory() as db:
        main_street = Location(
            name="Main Street",
            address="1 Main Street",
            city="Leeds",
            postcode="LS1 1AA",
            phone="0113 000 0000",
            is_active=True,
            base_prep_minutes=15,
            per_item_prep_minutes=2,
            slot_interval_minutes=15,
            opening_hours=[
                OpeningHours(day_of_week=day, open_time=time(11, 0), close_time=time(22, 0))
                for day in range(7)
            ],
        )
        harbour = Location(name="Harbour", address="5 Quay Road", is_active=True)
        closed = Location(name="Old Town", address="9 High Street", is_active=False)
        margherita = MenuItem(
            name="Margherita", description="Classic tomato and mozzarella", price=Decimal("8.00")
        )
        pepperoni = MenuItem(name="Pepperoni", description="Spicy pepperoni", price=Decimal("9.50"))
        basil = Ingredient(name="Basil", price=Decimal("0.50"))
        olives = Ingredient(name="Olives", price=Decimal("0.75"))
        onion = Ingredient(name="Onion", price=Decimal("0.00"))

        db.add_all([main_street, harbour, closed, margherita, pepperoni, basil, olives, onion])
        await db.commit()

        return {
            "location": main_street.id,
            "harbour": harbour.id,
            "inactive_location": closed.id,
            "margherita": margherita.id,
            "pepperoni": pepperoni.id,
            "basil": basil.id,
            "olives": olives.id,
            "onion": onion.id,
        }


@pytest.fixture
def fake_email():
    return FakeEmailService()


@pytest.fixture
def gateway():
    return StripeCheckoutGateway(
        api_key="sk_test_123",
        currency="gbp",
        success_url="http://localhost:5173/checkout/success?session_id={CHECKOUT_SESSION_ID}",
        cancel_url="http://localhost:5173/checkout/cancel",
    )


@pytest.fixture
async def client(session_factory, fake_email, gateway):
    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_email_service] = lambda: fake_email
    app.dependency_overrides[get_checkout_gateway] = lambda: gateway

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
