"""
API tests for checkout, order history, receipts, labels and statistics.
"""
import pytest
from sqlalchemy.exc import OperationalError

from models.log import Log, PrintLog
from models.order import Order, OrderItem
from models.variant import RecentBarcode, Variant


def _checkout(client, headers, products, **overrides):
    body = {
        "items": [{"product_id": products[0].id, "quantity": 2, "discount_percent": 10}],
        "tendered_amount": 900,
    }
    body.update(overrides)
    return client.post("/orders/checkout", json=body, headers=headers)


class TestCheckoutEndpoint:

    def test_successful_sale(self, client, cashier_headers, products, db_session):
        response = _checkout(client, cashier_headers, products)
        assert response.status_code == 201
        data = response.json()
        assert data["total_amount"] == 900
        assert data["discount_amount"] == 100
        assert data["change_amount"] == 0
        assert data["customer_name"] == "Cash Customer"
        assert data["payment_status"] == "completed"
        assert data["items"][0]["product_name"] == "Linen Shirt"

        log = db_session.query(Log).filter_by(action="ORDER_CHECKOUT").one()
        assert log.status == "SUCCESS"

    def test_insufficient_tender(self, client, cashier_headers, products, db_session):
        response = _checkout(client, cashier_headers, products, tendered_amount=899)
        assert response.status_code == 400
        assert response.json()["detail"] == "insufficient tender"
        assert db_session.query(Order).count() == 0

    def test_invalid_phone(self, client, cashier_headers, products):
        response = _checkout(client, cashier_headers, products, phone_number="call me")
        assert response.status_code == 400
        assert response.json()["detail"] == "invalid phone format"

    def test_empty_cart(self, client, cashier_headers, products):
        response = _checkout(client, cashier_headers, products, items=[])
        assert response.status_code == 400
        assert response.json()["detail"] == "cart is empty"

    def test_unknown_product(self, client, cashier_headers, products):
        response = _checkout(client, cashier_headers, products, items=[{"product_id": 4242}])
        assert response.status_code == 404

    def test_discount_out_of_range(self, client, cashier_headers, products):
        items = [{"product_id": products[0].id, "discount_percent": 120}]
        assert _checkout(client, cashier_headers, products, items=items).status_code == 422

    @pytest.mark.parametrize("tendered", ["Infinity", "NaN"])
    def test_non_finite_tender_rejected(self, client, cashier_headers, products, db_session, tendered):
        body = '{"items": [{"product_id": %d, "quantity": 1}], "tendered_amount": %s}' % (products[0].id, tendered)
        response = client.post("/orders/checkout", content=body,
                               headers={**cashier_headers, "Content-Type": "application/json"})
        assert response.status_code == 422
        assert db_session.query(Order).count() == 0

    def test_store_failure_maps_to_500_and_is_audited(self, client, cashier_headers, products, db_session,
                                                      monkeypatch):
        real_flush = db_session.flush
        calls = {"n": 0}

        def flush_failing_once(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                raise OperationalError("INSERT INTO orders", {}, Exception("database is locked"))
            return real_flush(*args, **kwargs)

        monkeypatch.setattr(db_session, "flush", flush_failing_once)

        response = _checkout(client, cashier_headers, products)
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to save order. Please try again."

        monkeypatch.undo()
        assert db_session.query(Order).count() == 0
        log = db_session.query(Log).filter_by(action="ORDER_CHECKOUT").one()
        assert log.status == "FAIL"
        assert log.meta["stage"] == "order"


class TestOrderHistory:

    def test_list_newest_first_and_detail(self, client, cashier_headers, products):
        first = _checkout(client, cashier_headers, products).json()
        second = _checkout(client, cashier_headers, products,
                           items=[{"product_id": products[2].id}], tendered_amount=250).json()

        response = client.get("/orders", headers=cashier_headers)
        assert response.status_code == 200
        assert [o["id"] for o in response.json()["items"]] == [second["id"], first["id"]]

        detail = client.get(f"/orders/{first['id']}", headers=cashier_headers).json()
        assert len(detail["items"]) == 1

    def test_missing_order(self, client, cashier_headers):
        assert client.get("/orders/12345", headers=cashier_headers).status_code == 404

    def test_receipt_pdf_is_logged(self, client, cashier_headers, products, db_session):
        order = _checkout(client, cashier_headers, products, customer_name="Ayesha",
                          phone_number="0321 7456467").json()

        response = client.get(f"/orders/{order['id']}/receipt", headers=cashier_headers)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

        entry = db_session.query(PrintLog).one()
        assert entry.kind == "receipt"
        assert entry.reference == str(order["id"])

    def test_receipt_survives_print_log_failure(self, client, cashier_headers, products, db_session,
                                                monkeypatch):
        order = _checkout(client, cashier_headers, products).json()

        def failing_commit():
            raise OperationalError("INSERT INTO print_logs", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db_session, "commit", failing_commit)
        response = client.get(f"/orders/{order['id']}/receipt", headers=cashier_headers)
        monkeypatch.undo()

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")
        assert db_session.query(PrintLog).count() == 0


class TestBarcodes:

    def test_create_and_print_labels(self, client, admin_headers, db_session):
        created = client.post("/variants", json={"size": "M", "price": 1299}, headers=admin_headers)
        assert created.status_code == 201
        variant_id = created.json()["id"]
        assert "-" in variant_id

        response = client.post("/variants/labels", json={"variant_ids": [variant_id]}, headers=admin_headers)
        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")
        assert db_session.query(RecentBarcode).count() == 1
        assert db_session.query(PrintLog).filter_by(kind="label").count() == 1

        recent = client.get("/variants/recent", headers=admin_headers).json()
        assert recent[0]["variant_id"] == variant_id

    def test_labels_survive_print_log_failure(self, client, admin_headers, db_session, monkeypatch):
        db_session.add(Variant(id="1718000000000-7", size="S", price=999))
        db_session.commit()

        def failing_commit():
            raise OperationalError("INSERT INTO recent_barcodes", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db_session, "commit", failing_commit)
        response = client.post("/variants/labels", json={"variant_ids": ["1718000000000-7"]},
                               headers=admin_headers)
        monkeypatch.undo()

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")
        assert db_session.query(RecentBarcode).count() == 0
        assert db_session.query(PrintLog).count() == 0

    def test_unknown_variant(self, client, admin_headers):
        response = client.post("/variants/labels", json={"variant_ids": ["nope"]}, headers=admin_headers)
        assert response.status_code == 404

    def test_non_positive_price(self, client, admin_headers):
        assert client.post("/variants", json={"size": "S", "price": 0}, headers=admin_headers).status_code == 422

    def test_delete(self, client, admin_headers):
        variant_id = client.post("/variants", json={"size": "L", "price": 50}, headers=admin_headers).json()["id"]
        assert client.delete(f"/variants/{variant_id}", headers=admin_headers).status_code == 200
        assert client.get("/variants", headers=admin_headers).json() == []


class TestStats:

    def test_empty_history(self, client, cashier_headers):
        data = client.get("/stats/summary", headers=cashier_headers).json()
        assert data["total_orders"] == 0
        assert data["average_order_value"] == 0
        assert data["top_product"] is None

    def test_summary_after_sales(self, client, cashier_headers, products):
        _checkout(client, cashier_headers, products)
        _checkout(client, cashier_headers, products,
                  items=[{"product_id": products[2].id, "quantity": 1}], tendered_amount=300)

        data = client.get("/stats/summary", headers=cashier_headers).json()
        assert data["total_orders"] == 2
        assert data["total_products"] == 3
        assert data["sales_today"] == 1150
        assert data["sales_this_year"] == 1150
        assert data["average_order_value"] == 575
        assert data["top_product"]["product_id"] == products[0].id
        assert data["top_product"]["total_quantity_sold"] == 2
        assert data["display"]["total_orders"] == "2"
        assert data["display"]["total_products"] == "3"
        assert data["display"]["average_order_value"] == "PKR 575.00"
        assert data["display"]["sales_this_year"].endswith("K")

    def test_recent_sales(self, client, cashier_headers, products, db_session):
        for _ in range(3):
            _checkout(client, cashier_headers, products)

        rows = client.get("/stats/recent-sales", params={"limit": 2}, headers=cashier_headers).json()["data"]
        assert len(rows) == 2
        assert rows[0]["order_id"] > rows[1]["order_id"]
        assert db_session.query(OrderItem).count() == 3
