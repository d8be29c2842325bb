from datetime import datetime
from typing import List, Optional

from agroconnect.schemas.base import BaseSchema
from agroconnect.schemas.pagination import Pagination
from agroconnect.schemas.product import ProductOut


class SearchResponse(BaseSchema):
    products: List[ProductOut]
    pagination: Pagination


class BuyerProductDetail(BaseSchema):
    product: ProductOut
    related_products: List[ProductOut]


class FavoriteRequest(BaseSchema):
    product_id: int


class FavoriteOut(BaseSchema):
    id: int
    product_id: int
    created_at: datetime
    product: Optional[ProductOut] = None


class FavoriteResponse(BaseSchema):
    message: str
    favorite: FavoriteOut


class FavoriteListResponse(BaseSchema):
    favorites: List[FavoriteOut]
    pagination: Pagination
