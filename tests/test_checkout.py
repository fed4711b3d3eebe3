"""
Tests for the checkout orchestrator: validation order, persisted figures,
item snapshots and rollback on store failure.
"""
import pytest
from sqlalchemy.exc import OperationalError

from models.order import Order, OrderItem
from services.calculator import Cart, CartLine
from services.checkout import checkout, validate_checkout
from services.errors import StoreError, ValidationError


def _cart(*lines):
    return Cart([CartLine(**line) for line in lines])


SHIRTS = {"product_id": 1, "product_name": "Linen Shirt", "price": 500, "quantity": 2, "discount_percent": 10}
JEANS = {"product_id": 2, "product_name": "Denim Jeans", "price": 1000, "quantity": 1}


class TestValidation:

    def test_insufficient_tender(self):
        with pytest.raises(ValidationError, match="insufficient tender"):
            validate_checkout(_cart(JEANS), None, 999)

    def test_exact_tender_gives_zero_change(self):
        totals = validate_checkout(_cart(JEANS), None, 1000)
        assert totals.total == 1000
        assert totals.change == 0

    def test_rejects_phone_with_letters(self):
        with pytest.raises(ValidationError, match="invalid phone format"):
            validate_checkout(_cart(JEANS), "abc123", 1000)

    def test_accepts_formatted_phone(self):
        totals = validate_checkout(_cart(JEANS), "+92-321 7456467", 1000)
        assert totals.change == 0

    def test_phone_checked_before_tender(self):
        with pytest.raises(ValidationError, match="invalid phone format"):
            validate_checkout(_cart(JEANS), "call me", 1)

    def test_empty_cart(self):
        with pytest.raises(ValidationError, match="cart is empty"):
            validate_checkout(Cart(), None, 0)

    @pytest.mark.parametrize("tendered", [float("inf"), float("nan"), float("-inf")])
    def test_non_finite_tender_rejected(self, tendered):
        with pytest.raises(ValidationError, match="insufficient tender"):
            validate_checkout(_cart(JEANS), None, tendered)


class TestCheckout:

    def test_scenario_persists_completed_order(self, db_session):
        order = checkout(db_session, _cart(SHIRTS), tendered_amount=900)

        assert order.id is not None
        assert order.subtotal_amount == 1000
        assert order.discount_amount == 100
        assert order.total_amount == 900
        assert order.tendered_amount == 900
        assert order.change_amount == 0
        assert order.payment_status == "completed"
        assert order.payment_method == "cash"
        assert order.customer_name == "Cash Customer"
        assert order.phone_number is None

    def test_items_are_snapshots(self, db_session):
        order = checkout(db_session, _cart(SHIRTS, JEANS), tendered_amount=2000,
                         customer_name="  Ayesha Khan ", phone_number="0321-7456467")

        assert order.customer_name == "Ayesha Khan"
        assert order.change_amount == 100
        items = db_session.query(OrderItem).filter(OrderItem.order_id == order.id).order_by(OrderItem.id).all()
        assert [(i.product_id, i.product_name, i.price, i.quantity) for i in items] == [
            (1, "Linen Shirt", 500, 2),
            (2, "Denim Jeans", 1000, 1),
        ]
        assert items[0].discount_percentage == 10
        assert items[0].subtotal == 1000
        assert items[0].total_after_discount == 900

    def test_validation_failure_writes_nothing(self, db_session):
        with pytest.raises(ValidationError):
            checkout(db_session, _cart(JEANS), tendered_amount=999)
        assert db_session.query(Order).count() == 0

    def test_money_is_rounded(self, db_session):
        line = {"product_id": 3, "product_name": "Cotton Scarf", "price": 99.99, "quantity": 3, "discount_percent": 15}
        order = checkout(db_session, _cart(line), tendered_amount=300)
        assert order.total_amount == 254.97
        assert order.change_amount == 45.03

    def test_item_failure_rolls_back_header(self, db_session, monkeypatch):
        real_flush = db_session.flush
        calls = {"n": 0}

        def failing_flush(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 2:
                raise OperationalError("INSERT INTO order_items", {}, Exception("disk I/O error"))
            return real_flush(*args, **kwargs)

        monkeypatch.setattr(db_session, "flush", failing_flush)

        with pytest.raises(StoreError) as exc_info:
            checkout(db_session, _cart(SHIRTS), tendered_amount=900)

        assert exc_info.value.stage == "items"
        monkeypatch.undo()
        assert db_session.query(Order).count() == 0
        assert db_session.query(OrderItem).count() == 0

    def test_nan_tender_writes_nothing(self, db_session):
        with pytest.raises(ValidationError):
            checkout(db_session, _cart(SHIRTS), tendered_amount=float("nan"))
        assert db_session.query(Order).count() == 0

    def test_header_failure_reports_order_stage(self, db_session, monkeypatch):
        def failing_flush(*args, **kwargs):
            raise OperationalError("INSERT INTO orders", {}, Exception("database is locked"))

        monkeypatch.setattr(db_session, "flush", failing_flush)

        with pytest.raises(StoreError) as exc_info:
            checkout(db_session, _cart(SHIRTS), tendered_amount=900)

        assert exc_info.value.stage == "order"
        monkeypatch.undo()
        assert db_session.query(Order).count() == 0
