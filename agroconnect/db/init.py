from loguru import logger

from agroconnect.constants.nigeria import NIGERIAN_STATES
from agroconnect.db.session import engine, Base, SessionLocal
from agroconnect.models.product import Product  # noqa: F401
from agroconnect.models.draft import ProductDraft  # noqa: F401
from agroconnect.models.favorite import BuyerFavorite  # noqa: F401
from agroconnect.models.state import State


def seed_states(db):
    if db.query(State).count():
        return
    db.add_all([State(name=state["name"], code=state["code"]) for state in NIGERIAN_STATES])
    db.commit()
    logger.info(f"Seeded {len(NIGERIAN_STATES)} states")


def init_db():
    # Create all tables
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_states(db)
    finally:
        db.close()
