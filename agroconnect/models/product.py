from sqlalchemy import Column, String, Boolean, Enum, Float, Date, Text, JSON, Index
from agroconnect.models.base import BaseModel

PRODUCT_STATUSES = ("active", "inactive")


class Product(BaseModel):
    __tablename__ = "products"

    farmer_id = Column(String(64), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    crop_type = Column(String(50), nullable=False, index=True)
    variety = Column(String(50), nullable=False)
    is_organic = Column(Boolean, nullable=False, default=False)
    quality_grade = Column(String(20), nullable=False)
    quantity_available = Column(Float, nullable=False)
    unit = Column(String(20), nullable=False)
    price_per_unit = Column(Float, nullable=False)
    minimum_order_quantity = Column(Float)
    bulk_discount_percentage = Column(Float)
    harvest_date = Column(Date)
    available_from = Column(Date, nullable=False)
    available_until = Column(Date, nullable=False)
    storage_method = Column(String(50), nullable=False)
    description = Column(Text)
    location = Column(String(255))
    certifications = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)
    status = Column(Enum(*PRODUCT_STATUSES, name="product_statuses"), nullable=False, default="active")

    __table_args__ = (
        Index("ix_products_status_crop", "status", "crop_type"),
    )
