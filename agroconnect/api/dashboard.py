from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from agroconnect.api.products import status_condition
from agroconnect.auth.security import AuthenticatedUser, get_current_user
from agroconnect.db.session import get_db
from agroconnect.models.draft import ProductDraft
from agroconnect.models.product import Product
from agroconnect.schemas.dashboard import DashboardStats
from agroconnect.utils.product_utils import format_price

router = APIRouter()


@router.get(
    "",
    response_model=DashboardStats,
    summary="Farmer dashboard statistics",
    description="Counts of the caller's listings by status, open drafts and total catalogue value.",
)
def read_dashboard(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    today = date.today()
    owned = db.query(Product).filter(Product.farmer_id == current_user.id)

    total_value = (
        db.query(func.coalesce(func.sum(Product.price_per_unit * Product.quantity_available), 0))
        .filter(Product.farmer_id == current_user.id)
        .scalar()
    )

    return {
        "total_products": owned.count(),
        "active_products": owned.filter(status_condition("active", today)).count(),
        "inactive_products": owned.filter(Product.status == "inactive").count(),
        "expired_products": owned.filter(status_condition("expired", today)).count(),
        "draft_count": db.query(ProductDraft).filter(ProductDraft.farmer_id == current_user.id).count(),
        "total_value": float(total_value),
        "formatted_total_value": format_price(total_value),
    }
