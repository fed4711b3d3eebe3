# backend/routes/products.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from database import get_db
from utils.tokenJWT import get_current_user, role_required
from utils.audit import write_log, client_ip
from models.users import User
from models.category import Category
from models.product import Product
import schemas.product as product_schemas

router = APIRouter(tags=["Products"])


# ---- HELPERS ----
def _norm_code(code: Optional[str]) -> Optional[str]:
    if code is None:
        return None
    c = code.strip()
    return c if c else None

def _product_to_out(p: Product) -> product_schemas.ProductOut:
    return product_schemas.ProductOut(
        id=p.id,
        name=p.name,
        category_id=p.category_id,
        category_name=p.category.name if p.category else None,
        code=p.code,
        price=p.price,
        stock=p.stock,
        created_at=p.created_at,
    )


# =========================
# PRODUCT LIST
# =========================
@router.get("/products", response_model=product_schemas.ProductListPage)
def list_products(
    q: Optional[str] = Query(None, description="Search in name or barcode"),
    category_id: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=10000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Product).options(joinedload(Product.category))

    if q:
        like = f"%{q.strip()}%"
        query = query.filter(or_(Product.name.ilike(like), Product.code.ilike(like)))
    if category_id is not None:
        query = query.filter(Product.category_id == category_id)

    query = query.order_by(Product.name.asc(), Product.id.asc())
    total = query.count()
    items = query.offset((page - 1) * page_size).limit(page_size).all()

    return {
        "items": [_product_to_out(p) for p in items],
        "total": total,
        "page": page,
        "page_size": page_size,
    }


# =========================
# BARCODE LOOKUPS
# =========================
@router.get("/products/code/{code}/exists", response_model=product_schemas.CodeCheck)
def check_product_code(
    code: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    norm = _norm_code(code)
    exists = db.query(Product.id).filter(Product.code == norm).first() is not None
    return {"code": norm or "", "exists": exists}


# Scanner lookup at the register
@router.get("/products/code/{code}", response_model=product_schemas.ProductOut)
def get_product_by_code(
    code: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = db.query(Product).filter(Product.code == _norm_code(code)).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return _product_to_out(product)


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/products/{product_id}", response_model=product_schemas.ProductOut)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return _product_to_out(product)


# =========================
# ADD PRODUCT
# =========================
@router.post("/products", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def add_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    category = db.query(Category).filter(Category.name == payload.category).first()
    if not category:
        raise HTTPException(status_code=400, detail="Invalid category selected")

    norm_code = _norm_code(payload.code)
    exists = db.query(Product).filter(Product.code == norm_code).first()
    if exists:
        raise HTTPException(status_code=409, detail="Barcode already exists")

    new_product = Product(
        name=payload.name,
        category_id=category.id,
        code=norm_code,
        price=payload.price,
        stock=payload.stock,
    )
    db.add(new_product)
    db.commit()
    db.refresh(new_product)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"id": new_product.id, "code": new_product.code}
    )
    return _product_to_out(new_product)
