from agroconnect.schemas.base import BaseSchema


class DashboardStats(BaseSchema):
    total_products: int
    active_products: int
    inactive_products: int
    expired_products: int
    draft_count: int
    total_value: float
    formatted_total_value: str
