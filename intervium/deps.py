# intervium/deps.py
import logging

from fastapi import Depends, Header, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from intervium.db.base import SessionLocal
from intervium.errors import StoreUnavailable
from intervium.services.attempt_store import AttemptStore
from intervium.services.auth import verify_bearer
from intervium.services.catalog import Catalog
from intervium.services.identifiers import ensure_user_id

logger = logging.getLogger(__name__)

# ----------------------------
# DB 세션
# ----------------------------
def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()  # commit 포함
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("[DB] session failed: %s", e)
        raise StoreUnavailable(detail={"operation": "commit"}) from e
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

# ----------------------------
# 현재 사용자 (토큰 sub)
# ----------------------------
async def get_current_user(
    authorization: str | None = Header(None),
):
    claims = await verify_bearer(authorization)
    return {
        "id": ensure_user_id(claims["user_id"]),
        "email": claims.get("email"),
    }

# ----------------------------
# 카탈로그 / 저장소
# ----------------------------
def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def get_store(db: Session = Depends(get_db)) -> AttemptStore:
    return AttemptStore(db)
