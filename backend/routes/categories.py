# backend/routes/categories.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user, role_required
from utils.audit import write_log, client_ip
from models.users import User
from models.category import Category
from models.product import Product
from schemas.category import CategoryCreate, CategoryOut

router = APIRouter(prefix="/categories", tags=["Categories"])
logger = logging.getLogger(__name__)


# List categories, newest first
@router.get("", response_model=List[CategoryOut])
def list_categories(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return db.query(Category).order_by(Category.created_at.desc(), Category.id.desc()).all()


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    if db.query(Category).filter(Category.name == payload.name).first():
        raise HTTPException(status_code=409, detail="Category already exists")

    category = Category(name=payload.name, description=payload.description)
    try:
        db.add(category)
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent create of the same name
        db.rollback()
        logger.warning("Category %s create rejected by the database: %s", payload.name, e)
        raise HTTPException(status_code=409, detail="Category already exists")
    db.refresh(category)

    write_log(db, user_id=current_user.id, action="CATEGORY_CREATE", resource="categories",
              status="SUCCESS", ip=client_ip(request), meta={"id": category.id, "name": category.name})
    return category


# Delete by name; refused while products still reference the category
@router.delete("/{name}")
def delete_category(
    name: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    category = db.query(Category).filter(Category.name == name).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    in_use = db.query(Product).filter(Product.category_id == category.id).count()
    if in_use:
        raise HTTPException(status_code=409, detail=f'Failed to delete "{name}". It might be in use.')

    try:
        db.delete(category)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Category %s delete rejected by the database: %s", name, e)
        raise HTTPException(status_code=409, detail=f'Failed to delete "{name}". It might be in use.')

    write_log(db, user_id=current_user.id, action="CATEGORY_DELETE", resource="categories",
              status="SUCCESS", ip=client_ip(request), meta={"name": name})
    return {"detail": f'Category "{name}" deleted.'}
