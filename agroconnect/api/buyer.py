from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from loguru import logger
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from agroconnect.auth.security import AuthenticatedUser, get_current_user
from agroconnect.core.exceptions import BackendFailure, ConflictError, NotFoundError, ValidationError
from agroconnect.db.session import get_db
from agroconnect.models.favorite import BuyerFavorite
from agroconnect.models.product import Product
from agroconnect.schemas.buyer import (
    BuyerProductDetail,
    FavoriteListResponse,
    FavoriteOut,
    FavoriteRequest,
    FavoriteResponse,
    SearchResponse,
)
from agroconnect.schemas.image import SuccessResponse
from agroconnect.schemas.pagination import paginate

router = APIRouter()

AVAILABILITY_WINDOWS = {"now": 0, "week": 7, "month": 30}
HARVEST_WINDOWS = {"30days": 30, "3months": 90, "6months": 180}
SORT_OPTIONS = ["date", "price_asc", "price_desc"]


def _csv(value: Optional[str]):
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def listed_products(db: Session, today: Optional[date] = None):
    """Listings a buyer may see: active, in stock and not yet expired."""
    today = today or date.today()
    return db.query(Product).filter(
        Product.status == "active",
        Product.quantity_available > 0,
        Product.available_until >= today,
    )


@router.get(
    "/products/search",
    response_model=SearchResponse,
    summary="Search listings",
    description="Search active listings with text, crop, grade, price, organic, availability and harvest filters.",
)
def search_products(
    q: Optional[str] = Query(None, description="Free-text search"),
    crop_types: Optional[str] = Query(None, description="Comma separated crop types"),
    quality_grades: Optional[str] = Query(None, description="Comma separated quality grades"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    is_organic: Optional[bool] = Query(None),
    availability: Optional[str] = Query(None, description="now, week or month"),
    harvest_date: Optional[str] = Query(None, description="30days, 3months or 6months"),
    sort_by: str = Query("date", description="date, price_asc or price_desc"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """
    - **q**: matches title, crop type, variety and description
    - **crop_types** / **quality_grades**: comma separated lists
    - **availability**: listings available now, within a week or within a month
    - **harvest_date**: harvested within the last 30 days, 3 or 6 months
    """
    if min_price is not None and max_price is not None and min_price > max_price:
        raise ValidationError("Minimum price cannot be greater than maximum price")
    if sort_by not in SORT_OPTIONS:
        raise ValidationError(f"Invalid sort option. Must be one of: {', '.join(SORT_OPTIONS)}")
    if availability and availability not in AVAILABILITY_WINDOWS:
        raise ValidationError(f"Invalid availability. Must be one of: {', '.join(AVAILABILITY_WINDOWS)}")
    if harvest_date and harvest_date not in HARVEST_WINDOWS:
        raise ValidationError(f"Invalid harvest date filter. Must be one of: {', '.join(HARVEST_WINDOWS)}")

    today = date.today()
    query = listed_products(db, today)

    if q:
        query = query.filter(or_(
            Product.title.ilike(f"%{q}%"),
            Product.crop_type.ilike(f"%{q}%"),
            Product.variety.ilike(f"%{q}%"),
            Product.description.ilike(f"%{q}%"),
        ))
    if _csv(crop_types):
        query = query.filter(Product.crop_type.in_(_csv(crop_types)))
    if _csv(quality_grades):
        query = query.filter(Product.quality_grade.in_(_csv(quality_grades)))
    if min_price is not None:
        query = query.filter(Product.price_per_unit >= min_price)
    if max_price is not None:
        query = query.filter(Product.price_per_unit <= max_price)
    if is_organic:
        query = query.filter(Product.is_organic.is_(True))
    if availability:
        query = query.filter(Product.available_from <= today + timedelta(days=AVAILABILITY_WINDOWS[availability]))
    if harvest_date:
        query = query.filter(Product.harvest_date >= today - timedelta(days=HARVEST_WINDOWS[harvest_date]))

    if sort_by == "price_asc":
        query = query.order_by(Product.price_per_unit.asc(), Product.id.desc())
    elif sort_by == "price_desc":
        query = query.order_by(Product.price_per_unit.desc(), Product.id.desc())
    else:
        query = query.order_by(Product.created_at.desc(), Product.id.desc())

    try:
        products, pagination = paginate(query, page, limit)
    except SQLAlchemyError:
        logger.exception("Product search failed")
        raise BackendFailure("Failed to fetch products")

    return {"products": products, "pagination": pagination}


@router.get(
    "/products/{product_id}",
    response_model=BuyerProductDetail,
    summary="Get listing details",
    description="An active listing and up to four related listings of the same crop from other farmers.",
)
def read_listing(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    product = db.query(Product).filter(Product.id == product_id, Product.status == "active").first()
    if product is None:
        raise NotFoundError("Product not found")

    related = (
        listed_products(db)
        .filter(
            Product.crop_type == product.crop_type,
            Product.id != product.id,
            Product.farmer_id != product.farmer_id,
        )
        .order_by(Product.created_at.desc())
        .limit(4)
        .all()
    )
    return {"product": product, "related_products": related}


@router.get(
    "/favorites",
    response_model=FavoriteListResponse,
    summary="List favourites",
)
def read_favorites(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    query = (
        db.query(BuyerFavorite)
        .join(Product, BuyerFavorite.product_id == Product.id)
        .options(joinedload(BuyerFavorite.product))
        .filter(BuyerFavorite.buyer_id == current_user.id, Product.status == "active")
        .order_by(BuyerFavorite.created_at.desc(), BuyerFavorite.id.desc())
    )
    favorites, pagination = paginate(query, page, limit)
    return {"favorites": [FavoriteOut.model_validate(favorite) for favorite in favorites], "pagination": pagination}


@router.post(
    "/favorites",
    response_model=FavoriteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a listing to favourites",
)
def add_favorite(
    body: FavoriteRequest,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    product = db.query(Product).filter(Product.id == body.product_id, Product.status == "active").first()
    if product is None:
        raise NotFoundError("Product not found or inactive")

    existing = (
        db.query(BuyerFavorite)
        .filter(BuyerFavorite.buyer_id == current_user.id, BuyerFavorite.product_id == body.product_id)
        .first()
    )
    if existing:
        raise ConflictError("Product already in favorites")

    favorite = BuyerFavorite(buyer_id=current_user.id, product_id=body.product_id)
    try:
        db.add(favorite)
        db.commit()
        db.refresh(favorite)
    except IntegrityError:
        db.rollback()
        raise ConflictError("Product already in favorites")
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Adding favourite {body.product_id} failed for buyer {current_user.id}")
        raise BackendFailure("Failed to add to favorites")

    return {"message": "Product added to favorites", "favorite": FavoriteOut.model_validate(favorite)}


@router.delete(
    "/favorites",
    response_model=SuccessResponse,
    summary="Remove a listing from favourites",
)
def remove_favorite(
    body: FavoriteRequest,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    deleted = (
        db.query(BuyerFavorite)
        .filter(BuyerFavorite.buyer_id == current_user.id, BuyerFavorite.product_id == body.product_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if not deleted:
        raise NotFoundError("Favorite not found")
    return {"success": True}
