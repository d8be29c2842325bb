from agroconnect.schemas.base import BaseSchema


class Pagination(BaseSchema):
    page: int
    limit: int
    total: int
    total_pages: int


def paginate(query, page: int, limit: int):
    """Apply offset/limit to a query and return ``(items, Pagination)``."""
    total = query.count()
    total_pages = (total + limit - 1) // limit
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, Pagination(page=page, limit=limit, total=total, total_pages=total_pages)
