from datetime import datetime
from decimal import Decimal

import pytest
import stripe
from sqlalchemy import func, select, text

from pizza_mvp.crud.order import get_order_with_items
from pizza_mvp.models import EmailStatusEnum, Order, OrderItem, OrderItemIngredient, OrderStatusEnum
from pizza_mvp.services import orders as orders_service


async def count_rows(session_factory, model):
    async with session_factory() as db:
        return (await db.execute(select(func.count()).select_from(model))).scalar_one()


def order_payload(catalog, session_id="cs_test_order_1", **overrides):
    payload = {
        "customerName": "Ann Smith",
        "customerEmail": "ann@example.com",
        "customerPhone": "+447700900123",
        "locationId": catalog["location"],
        "pickupTime": "2026-10-19T18:30:00",
        "sessionId": session_id,
        "totalAmount": 27.25,
        "cartItems": [
            {
                "menuItemId": catalog["margherita"],
                "quantity": 2,
                "basePrice": 8.00,
                "unitPrice": 8.50,
                "modifications": [
                    {"ingredientId": catalog["basil"], "ingredientName": "Basil", "price": 0.50, "extra": True},
                ],
            },
            {
                "menuItemId": catalog["pepperoni"],
                "quantity": 1,
                "basePrice": 9.50,
                "unitPrice": 10.25,
                "modifications": [
                    {"ingredientId": catalog["olives"], "ingredientName": "Olives", "price": 0.75, "extra": True},
                    {"ingredientId": catalog["onion"], "ingredientName": "Onion", "removed": True},
                ],
            },
        ],
    }
    payload.update(overrides)
    return payload


async def test_create_session_returns_redirect_url(client, monkeypatch):
    calls = []

    def fake_create(**params):
        calls.append(params)
        return {"id": "cs_test_1", "url": "https://checkout.stripe.com/c/pay/cs_test_1"}

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)

    response = await client.post(
        "/api/checkout/create-session",
        json={
            "items": [
                {
                    "menuItemName": "Margherita",
                    "menuItemDescription": "Classic tomato and mozzarella",
                    "unitPrice": 8.00,
                    "quantity": 2,
                    "modifications": [{"ingredientName": "Basil", "extra": True, "removed": False}],
                }
            ]
        },
    )

    assert response.status_code == 200
    assert response.json() == {"url": "https://checkout.stripe.com/c/pay/cs_test_1"}
    [line] = calls[0]["line_items"]
    assert line["price_data"]["unit_amount"] == 800
    assert line["price_data"]["product_data"]["description"] == "Classic tomato and mozzarella (+Basil)"
    assert line["quantity"] == 2


async def test_create_session_hides_provider_error_details(client, monkeypatch):
    def fake_create(**params):
        raise stripe.AuthenticationError("Invalid API Key provided: sk_live_***abcd")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)

    response = await client.post(
        "/api/checkout/create-session",
        json={"items": [{"menuItemName": "Margherita", "unitPrice": 8.0, "quantity": 1}]},
    )

    assert response.status_code == 400
    assert response.json() == {
        "error": "payment_provider",
        "message": "The payment provider rejected the request",
    }
    assert "sk_live" not in response.text


async def test_create_session_validates_quantity(client):
    response = await client.post(
        "/api/checkout/create-session",
        json={"items": [{"menuItemName": "Margherita", "unitPrice": 8.0, "quantity": 0}]},
    )
    assert response.status_code == 422


async def test_get_session_normalizes_customer_fields(client, monkeypatch):
    def fake_retrieve(session_id, **params):
        return stripe.checkout.Session.construct_from(
            {
                "id": session_id,
                "customer_details": {"name": "Ann Smith", "email": "ann@example.com", "phone": None},
                "payment_status": "paid",
                "amount_total": 2725,
            },
            "sk_test_123",
        )

    monkeypatch.setattr(stripe.checkout.Session, "retrieve", fake_retrieve)

    response = await client.get("/api/checkout/session/cs_test_1")

    assert response.status_code == 200
    assert response.json() == {
        "sessionId": "cs_test_1",
        "customerName": "Ann Smith",
        "customerEmail": "ann@example.com",
        "customerPhone": "",
        "paymentStatus": "paid",
        "totalAmount": 27.25,
    }


async def test_get_unknown_session_is_404(client, monkeypatch):
    def fake_retrieve(session_id, **params):
        raise stripe.InvalidRequestError(
            f"No such checkout.session: '{session_id}'", "id", code="resource_missing"
        )

    monkeypatch.setattr(stripe.checkout.Session, "retrieve", fake_retrieve)

    response = await client.get("/api/checkout/session/cs_missing")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


async def test_save_order_writes_full_graph(client, catalog, session_factory, fake_email):
    response = await client.post("/api/checkout/save-order", json=order_payload(catalog))

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Order saved successfully"

    assert await count_rows(session_factory, Order) == 1
    assert await count_rows(session_factory, OrderItem) == 2
    assert await count_rows(session_factory, OrderItemIngredient) == 3

    async with session_factory() as db:
        order = await get_order_with_items(db, body["orderId"])

    assert order.status == OrderStatusEnum.received
    assert order.stripe_session_id == "cs_test_order_1"
    assert order.customer_name == "Ann Smith"
    assert order.phone_number == "+447700900123"
    assert float(order.total_price) == 27.25
    assert order.confirmation_email_status == EmailStatusEnum.sent

    margherita = next(i for i in order.items if i.menu_item_id == catalog["margherita"])
    assert float(margherita.base_price) == 8.00
    assert float(margherita.total_price) == 17.00
    assert margherita.menu_item.name == "Margherita"
    assert [m.ingredient.name for m in margherita.ingredient_modifications] == ["Basil"]

    [email] = fake_email.sent
    assert email["order_id"] == body["orderId"]
    assert email["to"] == "ann@example.com"
    assert "2 x Margherita - £17.00 (+Basil)" in email["body"]
    assert "1 x Pepperoni - £10.25 (+Olives, -Onion)" in email["body"]
    assert "Main Street" in email["body"]


async def test_save_order_succeeds_when_email_fails(client, catalog, session_factory, fake_email):
    fake_email.fail = True

    response = await client.post("/api/checkout/save-order", json=order_payload(catalog))

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Order saved successfully"
    assert isinstance(body["orderId"], int)

    async with session_factory() as db:
        order = await db.get(Order, body["orderId"])
    assert order.confirmation_email_status == EmailStatusEnum.failed


async def test_save_order_with_email_disabled(client, catalog, session_factory, fake_email):
    fake_email.enabled = False

    response = await client.post("/api/checkout/save-order", json=order_payload(catalog))

    assert response.status_code == 200
    assert fake_email.sent == []
    async with session_factory() as db:
        order = await db.get(Order, response.json()["orderId"])
    assert order.confirmation_email_status == EmailStatusEnum.skipped


async def test_save_order_is_idempotent_per_session(client, catalog, session_factory, fake_email):
    first = await client.post("/api/checkout/save-order", json=order_payload(catalog))
    second = await client.post("/api/checkout/save-order", json=order_payload(catalog))

    assert first.status_code == second.status_code == 200
    assert second.json() == {"orderId": first.json()["orderId"], "message": "Order already saved"}
    assert await count_rows(session_factory, Order) == 1
    assert await count_rows(session_factory, OrderItem) == 2
    assert len(fake_email.sent) == 1


async def test_save_order_without_items(client, catalog, session_factory):
    response = await client.post("/api/checkout/save-order", json=order_payload(catalog, cartItems=[]))

    assert response.status_code == 200
    assert await count_rows(session_factory, Order) == 1
    assert await count_rows(session_factory, OrderItem) == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"locationId": 999},
        {"cartItems": [{"menuItemId": 999, "quantity": 1, "basePrice": 5, "unitPrice": 5}]},
        {
            "cartItems": [
                {
                    "menuItemId": 1,
                    "quantity": 1,
                    "basePrice": 8,
                    "unitPrice": 8,
                    "modifications": [{"ingredientName": "Truffle", "extra": True}],
                }
            ]
        },
    ],
)
async def test_save_order_rejects_unknown_references(client, catalog, session_factory, fake_email, overrides):
    response = await client.post("/api/checkout/save-order", json=order_payload(catalog, **overrides))

    assert response.status_code == 400
    assert response.json() == {
        "error": "invalid_order",
        "message": "The order could not be saved because it references unknown data",
    }
    assert await count_rows(session_factory, Order) == 0
    assert await count_rows(session_factory, OrderItem) == 0
    assert fake_email.sent == []


async def test_save_order_rolls_back_whole_graph_on_database_error(client, catalog, session_factory, fake_email):
    # вставка модификаций падает после того, как заказ и позиции уже записаны в транзакции
    async with session_factory() as db:
        await db.execute(text(
            "CREATE TRIGGER reject_modifications BEFORE INSERT ON order_item_ingredients "
            "BEGIN SELECT RAISE(ABORT, 'modification rejected'); END"
        ))
        await db.commit()

    response = await client.post("/api/checkout/save-order", json=order_payload(catalog))

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_order"
    assert "modification rejected" not in response.text
    assert await count_rows(session_factory, Order) == 0
    assert await count_rows(session_factory, OrderItem) == 0
    assert await count_rows(session_factory, OrderItemIngredient) == 0
    assert fake_email.sent == []


async def test_save_order_concurrent_duplicate_returns_existing_order(
    client, catalog, session_factory, fake_email, monkeypatch
):
    async with session_factory() as db:
        existing = Order(
            customer_name="Ann Smith",
            email="ann@example.com",
            location_id=catalog["location"],
            pickup_time=datetime(2026, 10, 19, 18, 30),
            stripe_session_id="cs_test_order_1",
            total_price=Decimal("27.25"),
        )
        db.add(existing)
        await db.commit()
        existing_id = existing.id

    real_lookup = orders_service.get_order_by_session_id
    lookups = []

    async def lookup_missing_first(db, session_id):
        # первая проверка не видит заказ, который параллельный запрос уже сохранил
        lookups.append(session_id)
        if len(lookups) == 1:
            return None
        return await real_lookup(db, session_id)

    monkeypatch.setattr(orders_service, "get_order_by_session_id", lookup_missing_first)

    response = await client.post("/api/checkout/save-order", json=order_payload(catalog))

    assert response.status_code == 200
    assert response.json() == {"orderId": existing_id, "message": "Order already saved"}
    assert len(lookups) == 2
    assert await count_rows(session_factory, Order) == 1
    assert await count_rows(session_factory, OrderItem) == 0
    assert fake_email.sent == []


async def test_save_order_unexpected_error_is_client_error(client, catalog, session_factory, monkeypatch):
    async def broken_create_order(db, order_in):
        raise RuntimeError("disk quota exceeded on /var/lib/postgresql")

    monkeypatch.setattr(orders_service, "create_order", broken_create_order)

    response = await client.post("/api/checkout/save-order", json=order_payload(catalog))

    assert response.status_code == 400
    assert response.json() == {"error": "persistence", "message": "The order could not be saved"}
    assert "postgresql" not in response.text
    assert await count_rows(session_factory, Order) == 0
