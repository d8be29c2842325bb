from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from agroconnect.db.session import get_db
from agroconnect.models.state import State

router = APIRouter()


@router.get("/test", summary="Database connectivity check")
def connectivity_check(db: Session = Depends(get_db)):
    """Read a handful of rows from the states reference table."""
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        states = db.query(State.name, State.code).order_by(State.id).limit(5).all()
    except SQLAlchemyError:
        logger.exception("Connectivity check failed")
        return JSONResponse(
            status_code=500,
            content={"detail": "Database connection failed", "timestamp": timestamp},
        )

    return {
        "message": "Database connection successful",
        "states": [{"name": name, "code": code} for name, code in states],
        "timestamp": timestamp,
    }
