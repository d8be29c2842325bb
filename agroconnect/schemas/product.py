from datetime import date
from typing import Annotated, List, Optional

from pydantic import AfterValidator, Field, computed_field, model_validator

from agroconnect.constants.nigeria import (
    CERTIFICATIONS,
    MAJOR_CROPS,
    MEASUREMENT_UNITS,
    QUALITY_GRADES,
    STORAGE_METHODS,
)
from agroconnect.schemas.base import BaseSchema, TimestampSchema
from agroconnect.schemas.pagination import Pagination
from agroconnect.utils.product_utils import get_product_status


def _one_of(choices, message):
    def check(value):
        if value not in choices:
            raise ValueError(message)
        return value
    return AfterValidator(check)


def _within_a_year(value: date) -> date:
    today = date.today()
    try:
        limit = today.replace(year=today.year + 1)
    except ValueError:  # 29 February
        limit = today.replace(year=today.year + 1, day=28)
    if value > limit:
        raise ValueError("Harvest date cannot be more than 1 year in the future")
    return value


CropType = Annotated[str, _one_of(MAJOR_CROPS, "Please select a valid crop type")]
Variety = Annotated[str, Field(min_length=1, max_length=50)]
Title = Annotated[str, Field(min_length=10, max_length=100)]
QualityGrade = Annotated[str, _one_of(QUALITY_GRADES, "Please select a quality grade")]
Quantity = Annotated[float, Field(ge=0.1, le=1_000_000)]
Unit = Annotated[str, _one_of(MEASUREMENT_UNITS, "Please select a unit")]
Price = Annotated[float, Field(ge=100, le=1_000_000)]
MinimumOrder = Annotated[float, Field(ge=0.1)]
BulkDiscount = Annotated[float, Field(ge=0, le=50)]
HarvestDate = Annotated[date, AfterValidator(_within_a_year)]
StorageMethod = Annotated[str, _one_of(STORAGE_METHODS, "Please select a storage method")]
Description = Annotated[str, Field(max_length=1000)]
Location = Annotated[str, Field(max_length=255)]
Certification = Annotated[str, _one_of(CERTIFICATIONS, "Unknown certification")]
ImageUrl = Annotated[str, Field(min_length=1)]


def _check_minimum_order(minimum, quantity):
    if minimum is not None and quantity is not None and minimum > quantity:
        raise ValueError("Minimum order quantity cannot exceed available quantity")


def _check_window(available_from, available_until):
    if available_from is not None and available_until is not None and available_until <= available_from:
        raise ValueError("Available until date must be after available from date")


# Wizard steps. Each one validates exactly the fields its step collects.

class BasicInfo(BaseSchema):
    crop_type: CropType
    variety: Variety
    title: Title
    is_organic: bool = False
    quality_grade: QualityGrade


class QuantityPricing(BaseSchema):
    quantity_available: Quantity
    unit: Unit
    price_per_unit: Price
    minimum_order_quantity: Optional[MinimumOrder] = None
    bulk_discount_percentage: Optional[BulkDiscount] = None

    @model_validator(mode="after")
    def check_minimum_order(self):
        _check_minimum_order(self.minimum_order_quantity, self.quantity_available)
        return self


class ProductDetails(BaseSchema):
    harvest_date: Optional[HarvestDate] = None
    available_from: date
    available_until: date
    storage_method: StorageMethod
    description: Optional[Description] = None
    location: Optional[Location] = None
    certifications: List[Certification] = []

    @model_validator(mode="after")
    def check_availability_window(self):
        _check_window(self.available_from, self.available_until)
        return self


class ProductImages(BaseSchema):
    images: List[ImageUrl] = Field(min_length=1, max_length=8)


class ProductFields(BasicInfo, QuantityPricing, ProductDetails, ProductImages):
    """A complete listing."""


class ProductCreate(ProductFields):
    draft_id: Optional[int] = None


class PartialProductFields(BaseSchema):
    """Every listing field optional, still checked when present."""

    title: Optional[Title] = None
    crop_type: Optional[CropType] = None
    variety: Optional[Variety] = None
    is_organic: Optional[bool] = None
    quality_grade: Optional[QualityGrade] = None
    quantity_available: Optional[Quantity] = None
    unit: Optional[Unit] = None
    price_per_unit: Optional[Price] = None
    minimum_order_quantity: Optional[MinimumOrder] = None
    bulk_discount_percentage: Optional[BulkDiscount] = None
    harvest_date: Optional[HarvestDate] = None
    available_from: Optional[date] = None
    available_until: Optional[date] = None
    storage_method: Optional[StorageMethod] = None
    description: Optional[Description] = None
    location: Optional[Location] = None
    certifications: Optional[List[Certification]] = None
    images: Optional[List[ImageUrl]] = Field(None, max_length=8)

    @model_validator(mode="after")
    def check_related_fields(self):
        _check_minimum_order(self.minimum_order_quantity, self.quantity_available)
        _check_window(self.available_from, self.available_until)
        return self


class ProductUpdate(PartialProductFields):
    pass


class ProductStatusUpdate(BaseSchema):
    status: Annotated[str, _one_of(("active", "inactive"), "Status must be active or inactive")]


class ProductOut(TimestampSchema):
    id: int
    farmer_id: str
    title: str
    crop_type: str
    variety: Optional[str] = None
    is_organic: bool = False
    quality_grade: Optional[str] = None
    quantity_available: float
    unit: Optional[str] = None
    price_per_unit: float
    minimum_order_quantity: Optional[float] = None
    bulk_discount_percentage: Optional[float] = None
    harvest_date: Optional[date] = None
    available_from: Optional[date] = None
    available_until: Optional[date] = None
    storage_method: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    certifications: List[str] = []
    images: List[str] = []
    status: str

    @computed_field(alias="listingStatus")
    @property
    def listing_status(self) -> str:
        return get_product_status(self)


class ProductResponse(BaseSchema):
    message: str
    product: ProductOut


class ProductDetailResponse(BaseSchema):
    product: ProductOut


class ProductListResponse(BaseSchema):
    products: List[ProductOut]
    pagination: Pagination
