# backend/routes/variants.py
import random
import time
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user, role_required
from utils.audit import write_log, write_print_log, client_ip
from utils.pdf import generate_labels_pdf
from models.users import User
from models.variant import Variant, RecentBarcode
from schemas.variant import VariantCreate, VariantOut, LabelPrintRequest, RecentBarcodeOut

router = APIRouter(prefix="/variants", tags=["Barcodes"])


# Barcode value for a new variant: epoch millis plus a 0-999 suffix
def generate_variant_id() -> str:
    return f"{int(time.time() * 1000)}-{random.randint(0, 999)}"


@router.get("", response_model=List[VariantOut])
def list_variants(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return db.query(Variant).order_by(Variant.created_at.asc(), Variant.id.asc()).all()


@router.post("", response_model=VariantOut, status_code=status.HTTP_201_CREATED)
def create_variant(
    payload: VariantCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    variant_id = generate_variant_id()
    while db.query(Variant.id).filter(Variant.id == variant_id).first():
        variant_id = generate_variant_id()

    variant = Variant(id=variant_id, size=payload.size, price=payload.price)
    db.add(variant)
    db.commit()
    db.refresh(variant)

    write_log(db, user_id=current_user.id, action="VARIANT_CREATE", resource="variants",
              status="SUCCESS", ip=client_ip(request), meta={"id": variant.id})
    return variant


@router.delete("/{variant_id}")
def delete_variant(
    variant_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    variant = db.query(Variant).filter(Variant.id == variant_id).first()
    if not variant:
        raise HTTPException(status_code=404, detail="Variant not found")

    db.delete(variant)
    db.commit()
    write_log(db, user_id=current_user.id, action="VARIANT_DELETE", resource="variants",
              status="SUCCESS", ip=client_ip(request), meta={"id": variant_id})
    return {"detail": f"Variant '{variant_id}' deleted"}


# Last printed labels, newest first
@router.get("/recent", response_model=List[RecentBarcodeOut])
def list_recent_barcodes(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return (db.query(RecentBarcode)
            .order_by(RecentBarcode.created_at.desc(), RecentBarcode.id.desc())
            .limit(limit)
            .all())


@router.post("/labels")
def print_labels(
    payload: LabelPrintRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Label sheet PDF for the selected variants, in the order they were requested."""
    found = {v.id: v for v in db.query(Variant).filter(Variant.id.in_(payload.variant_ids)).all()}
    missing = [vid for vid in payload.variant_ids if vid not in found]
    if missing:
        raise HTTPException(status_code=404, detail=f"Unknown variants: {', '.join(missing)}")

    targets = [found[vid] for vid in payload.variant_ids]
    pdf_bytes = generate_labels_pdf(targets)

    write_print_log(
        db,
        kind="label",
        reference=",".join(v.id for v in targets),
        user_id=current_user.id,
        meta={"count": len(targets)},
        extra_rows=[RecentBarcode(variant_id=v.id, size=v.size, price=v.price) for v in targets],
    )

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": 'inline; filename="barcodes.pdf"'},
    )
