# backend/routes/orders.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Query, Response, status
from sqlalchemy.orm import Session, joinedload

from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import write_log, write_print_log, client_ip
from utils.pdf import generate_receipt_pdf
from models.users import User
from models.product import Product
from models.order import Order
from schemas.order import CheckoutRequest, OrderResponse, OrdersPage
from services.calculator import Cart, CartLine
from services.checkout import checkout
from services.errors import StoreError, ValidationError

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger(__name__)


def _get_order(db: Session, order_id: int) -> Order:
    order = db.query(Order).options(joinedload(Order.items)).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def _build_cart(db: Session, payload: CheckoutRequest) -> Cart:
    # Snapshot name and price from the catalog as they are right now
    ids = {line.product_id for line in payload.items}
    products = {p.id: p for p in db.query(Product).filter(Product.id.in_(ids)).all()} if ids else {}

    cart = Cart()
    for line in payload.items:
        product = products.get(line.product_id)
        if not product:
            raise HTTPException(status_code=404, detail=f"Product {line.product_id} not found")
        cart.add(CartLine(
            product_id=product.id,
            product_name=product.name,
            price=product.price,
            quantity=line.quantity,
            discount_percent=line.discount_percent,
        ))
    return cart


# Complete a sale: validate tender, persist order + items, return the saved order
@router.post("/checkout", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def checkout_order(
    payload: CheckoutRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        cart = _build_cart(db, payload)
        order = checkout(
            db,
            cart,
            tendered_amount=payload.tendered_amount,
            customer_name=payload.customer_name,
            phone_number=payload.phone_number,
            payment_method=payload.payment_method,
        )
    except ValidationError as e:
        logger.info("Checkout rejected: %s", e)
        write_log(db, user_id=current_user.id, action="ORDER_CHECKOUT", resource="orders", status="FAIL",
                  ip=client_ip(request), meta={"reason": str(e)})
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        write_log(db, user_id=current_user.id, action="ORDER_CHECKOUT", resource="orders", status="FAIL",
                  ip=client_ip(request), meta={"reason": str(e), "stage": e.stage})
        raise HTTPException(status_code=500, detail="Failed to save order. Please try again.")

    order_id = order.id
    write_log(db, user_id=current_user.id, action="ORDER_CHECKOUT", resource="orders", status="SUCCESS",
              ip=client_ip(request), meta={"order_id": order_id, "total": order.total_amount})
    return _get_order(db, order_id)


# Order history, newest first
@router.get("", response_model=OrdersPage)
def list_orders(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    q = db.query(Order).order_by(Order.created_at.desc(), Order.id.desc())
    total = q.count()
    rows = (q.options(joinedload(Order.items))
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all())
    return {"items": rows, "total": total, "page": page, "page_size": page_size}


@router.get("/{order_id}", response_model=OrderResponse)
def get_order_detail(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_order(db, order_id)


# Printable thermal receipt
@router.get("/{order_id}/receipt")
def print_receipt(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = _get_order(db, order_id)
    pdf_bytes = generate_receipt_pdf(order)

    write_print_log(db, kind="receipt", reference=str(order_id), user_id=current_user.id,
                    meta={"total": order.total_amount})

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="receipt_{order_id}.pdf"'},
    )
