# utils/audit.py
import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.log import Log, PrintLog

logger = logging.getLogger(__name__)


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None or request.client is None:
        return None
    return request.client.host


# Audit trail entry, committed together with whatever the caller left pending
def write_log(db: Session, *, user_id, action, resource, status="SUCCESS", ip=None, meta=None):
    entry = Log(user_id=user_id, action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    db.commit()


def write_print_log(db: Session, *, kind: str, reference: str, user_id=None, meta=None, extra_rows=()) -> bool:
    """Appends a print event after the document was produced.

    Best-effort: a failure here is logged and rolled back but never fails
    the print itself. `extra_rows` are committed in the same go (recent
    barcode rows for label prints).
    """
    try:
        db.add_all(list(extra_rows))
        db.add(PrintLog(kind=kind, reference=reference, user_id=user_id, meta=meta or {}))
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Could not record %s print for %s: %s", kind, reference, e)
        return False
