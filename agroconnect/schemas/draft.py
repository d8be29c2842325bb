from datetime import date
from typing import List, Optional

from agroconnect.schemas.base import BaseSchema, TimestampSchema
from agroconnect.schemas.product import CropType, PartialProductFields


class DraftPayload(PartialProductFields):
    """Draft body: crop type is the only field a draft must have."""

    crop_type: CropType


class DraftOut(TimestampSchema):
    id: int
    farmer_id: str
    title: Optional[str] = None
    crop_type: str
    variety: Optional[str] = None
    is_organic: Optional[bool] = None
    quality_grade: Optional[str] = None
    quantity_available: Optional[float] = None
    unit: Optional[str] = None
    price_per_unit: Optional[float] = None
    minimum_order_quantity: Optional[float] = None
    bulk_discount_percentage: Optional[float] = None
    harvest_date: Optional[date] = None
    available_from: Optional[date] = None
    available_until: Optional[date] = None
    storage_method: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    certifications: Optional[List[str]] = None
    images: Optional[List[str]] = None


class DraftResponse(BaseSchema):
    success: bool = True
    draft: DraftOut


class DraftDetailResponse(BaseSchema):
    draft: DraftOut


class DraftListResponse(BaseSchema):
    drafts: List[DraftOut]
