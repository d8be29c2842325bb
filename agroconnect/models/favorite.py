from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from agroconnect.models.base import BaseModel


class BuyerFavorite(BaseModel):
    __tablename__ = "buyer_favorites"

    buyer_id = Column(String(64), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    product = relationship("Product")

    __table_args__ = (
        UniqueConstraint("buyer_id", "product_id", name="uq_buyer_favorite"),
    )
