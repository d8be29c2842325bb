from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from agroconnect.auth.security import AuthenticatedUser, get_current_user
from agroconnect.core.exceptions import (
    BackendFailure,
    DomainError,
    NotFoundError,
    ValidationError,
    validation_error_from,
)
from agroconnect.db.session import get_db
from agroconnect.models.draft import ProductDraft
from agroconnect.models.product import Product
from agroconnect.schemas.image import SuccessResponse
from agroconnect.schemas.pagination import paginate
from agroconnect.schemas.product import (
    ProductCreate,
    ProductDetailResponse,
    ProductFields,
    ProductListResponse,
    ProductResponse,
    ProductStatusUpdate,
    ProductUpdate,
)
from agroconnect.services.storage import LocalBucketStorage, get_storage

router = APIRouter()

VALID_SORT_FIELDS = ["created_at", "updated_at", "price_per_unit", "quantity_available", "title"]
VALID_STATUS_FILTERS = ["active", "inactive", "expired", "pending", "out_of_stock"]


class ProductFilter:
    def __init__(
        self,
        search: Optional[str] = Query(None, description="Search in title, crop type and variety"),
        crop_type: Optional[str] = Query(None, description="Filter by crop type"),
        quality_grade: Optional[str] = Query(None, description="Filter by quality grade"),
        status: Optional[str] = Query(None, description="active, inactive, expired, pending or out_of_stock"),
        min_price: Optional[float] = Query(None, ge=0, description="Minimum price per unit"),
        max_price: Optional[float] = Query(None, ge=0, description="Maximum price per unit"),
        available_from: Optional[date] = Query(None, description="Available on or after this date"),
        available_until: Optional[date] = Query(None, description="Available on or before this date"),
    ):
        self.search = search
        self.crop_type = crop_type
        self.quality_grade = quality_grade
        self.status = status
        self.min_price = min_price
        self.max_price = max_price
        self.available_from = available_from
        self.available_until = available_until

    def apply(self, query, today: Optional[date] = None):
        today = today or date.today()

        if self.search:
            query = query.filter(or_(
                Product.title.ilike(f"%{self.search}%"),
                Product.crop_type.ilike(f"%{self.search}%"),
                Product.variety.ilike(f"%{self.search}%"),
            ))
        if self.crop_type:
            query = query.filter(Product.crop_type == self.crop_type)
        if self.quality_grade:
            query = query.filter(Product.quality_grade == self.quality_grade)
        if self.min_price is not None:
            query = query.filter(Product.price_per_unit >= self.min_price)
        if self.max_price is not None:
            query = query.filter(Product.price_per_unit <= self.max_price)
        if self.available_from:
            query = query.filter(Product.available_from >= self.available_from)
        if self.available_until:
            query = query.filter(Product.available_until <= self.available_until)

        if self.status:
            if self.status not in VALID_STATUS_FILTERS:
                raise ValidationError(f"Invalid status. Must be one of: {', '.join(VALID_STATUS_FILTERS)}")
            query = query.filter(status_condition(self.status, today))

        return query


def status_condition(listing_status: str, today: date):
    """SQL equivalent of ``get_product_status`` for one derived status."""
    not_expired = Product.available_until >= today
    started = Product.available_from <= today
    in_stock = Product.quantity_available > 0

    if listing_status == "expired":
        return Product.available_until < today
    if listing_status == "pending":
        return not_expired & (Product.available_from > today)
    if listing_status == "out_of_stock":
        return not_expired & started & ~in_stock
    return not_expired & started & in_stock & (Product.status == listing_status)


def get_owned_product(db: Session, product_id: int, farmer_id: str) -> Product:
    product = (
        db.query(Product)
        .filter(Product.id == product_id, Product.farmer_id == farmer_id)
        .first()
    )
    if product is None:
        raise NotFoundError("Product not found or access denied")
    return product


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Publish a complete listing. When `draftId` is given, that draft is removed in the same transaction.",
)
def create_product(
    product: ProductCreate,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """
    Create a new product listing for the current farmer.

    - **cropType**, **variety**, **title**, **qualityGrade**: basic info
    - **quantityAvailable**, **unit**, **pricePerUnit**: quantity and pricing
    - **availableFrom**, **availableUntil**, **storageMethod**: details
    - **images**: 1 to 8 uploaded image URLs
    - **draftId**: draft being promoted (optional)
    """
    db_product = Product(
        farmer_id=current_user.id,
        status="active",
        **product.model_dump(exclude={"draft_id"}),
    )
    db.add(db_product)

    if product.draft_id is not None:
        draft = (
            db.query(ProductDraft)
            .filter(ProductDraft.id == product.draft_id, ProductDraft.farmer_id == current_user.id)
            .first()
        )
        if draft is None:
            db.rollback()
            raise NotFoundError("Draft not found")
        db.delete(draft)

    try:
        db.commit()
        db.refresh(db_product)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Product insert failed for farmer {current_user.id}")
        raise BackendFailure("Failed to create product")

    logger.info(f"Product {db_product.id} created by farmer {current_user.id}")
    return {"message": "Product created successfully", "product": db_product}


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List the farmer's products",
    description="Retrieve a paginated, filtered and sorted list of the caller's listings.",
)
def read_products(
    filters: ProductFilter = Depends(),
    page: int = Query(1, ge=1, description="Page number starting from 1"),
    limit: int = Query(20, ge=1, le=100, description="Items per page (1-100)"),
    sort_by: str = Query("created_at", description="created_at, updated_at, price_per_unit, quantity_available or title"),
    sort_order: str = Query("desc", description="Sort order: asc or desc"),
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    if sort_by not in VALID_SORT_FIELDS:
        raise ValidationError(f"Invalid sort field. Must be one of: {', '.join(VALID_SORT_FIELDS)}")
    if sort_order not in ["asc", "desc"]:
        raise ValidationError("Sort order must be 'asc' or 'desc'")

    query = filters.apply(db.query(Product).filter(Product.farmer_id == current_user.id))

    sort_column = getattr(Product, sort_by)
    if sort_order == "desc":
        sort_column = sort_column.desc()
    query = query.order_by(sort_column, Product.id.desc())

    try:
        products, pagination = paginate(query, page, limit)
    except SQLAlchemyError:
        logger.exception(f"Product listing failed for farmer {current_user.id}")
        raise BackendFailure("Failed to fetch products")

    return {"products": products, "pagination": pagination}


@router.get(
    "/{product_id}",
    response_model=ProductDetailResponse,
    summary="Get product by ID",
)
def read_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    return {"product": get_owned_product(db, product_id, current_user.id)}


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a product",
    description="Partially update a listing. The listing must still be complete and consistent afterwards.",
)
def update_product(
    product_id: int,
    product: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    db_product = get_owned_product(db, product_id, current_user.id)
    update_data = product.model_dump(exclude_unset=True)

    merged = {field: getattr(db_product, field) for field in ProductFields.model_fields}
    merged.update(update_data)
    try:
        ProductFields.model_validate(merged)
    except PydanticValidationError as exc:
        raise validation_error_from("Invalid product data", exc)

    for field, value in update_data.items():
        setattr(db_product, field, value)

    try:
        db.commit()
        db.refresh(db_product)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Product {product_id} update failed")
        raise BackendFailure("Failed to update product")

    return {"message": "Product updated successfully", "product": db_product}


@router.patch(
    "/{product_id}/status",
    response_model=ProductResponse,
    summary="Activate or deactivate a product",
)
def update_product_status(
    product_id: int,
    body: ProductStatusUpdate,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    db_product = get_owned_product(db, product_id, current_user.id)
    db_product.status = body.status
    try:
        db.commit()
        db.refresh(db_product)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Product {product_id} status change failed")
        raise BackendFailure("Failed to update product")

    return {"message": f"Product marked {body.status}", "product": db_product}


@router.delete(
    "/{product_id}",
    response_model=SuccessResponse,
    summary="Delete a product",
    description="Delete a listing owned by the caller together with its stored images.",
)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    storage: LocalBucketStorage = Depends(get_storage),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    db_product = get_owned_product(db, product_id, current_user.id)
    image_urls = list(db_product.images or [])

    try:
        db.delete(db_product)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Product {product_id} delete failed")
        raise BackendFailure("Failed to delete product")

    for url in image_urls:
        key = storage.key_from_url(url)
        if not key or not key.startswith(f"{current_user.id}/") or not storage.is_safe_key(key):
            continue
        if not storage.exists(key):
            continue
        try:
            storage.remove(key)
        except DomainError:
            # best effort, the listing itself is already gone
            logger.warning(f"Could not remove image {key} of deleted product {product_id}")

    logger.info(f"Product {product_id} deleted by farmer {current_user.id}")
    return {"success": True}
