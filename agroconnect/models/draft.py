from sqlalchemy import Column, String, Boolean, Float, Date, Text, JSON
from agroconnect.models.base import BaseModel


class ProductDraft(BaseModel):
    """A listing saved part-way through the wizard. Only crop_type is required."""

    __tablename__ = "product_drafts"

    farmer_id = Column(String(64), nullable=False, index=True)
    title = Column(String(100))
    crop_type = Column(String(50), nullable=False)
    variety = Column(String(50))
    is_organic = Column(Boolean, default=False)
    quality_grade = Column(String(20))
    quantity_available = Column(Float)
    unit = Column(String(20))
    price_per_unit = Column(Float)
    minimum_order_quantity = Column(Float)
    bulk_discount_percentage = Column(Float)
    harvest_date = Column(Date)
    available_from = Column(Date)
    available_until = Column(Date)
    storage_method = Column(String(50))
    description = Column(Text)
    location = Column(String(255))
    certifications = Column(JSON, default=list)
    images = Column(JSON, default=list)
