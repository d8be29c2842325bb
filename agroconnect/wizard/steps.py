from enum import StrEnum
from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError

from agroconnect.core.exceptions import format_errors
from agroconnect.schemas.product import BasicInfo, ProductDetails, ProductImages, QuantityPricing


class WizardStep(StrEnum):
    BASIC = "basic"
    PRICING = "pricing"
    DETAILS = "details"
    IMAGES = "images"
    REVIEW = "review"


STEPS = [
    {"id": WizardStep.BASIC, "title": "Basic Info", "description": "Crop & variety"},
    {"id": WizardStep.PRICING, "title": "Pricing", "description": "Quantity & price"},
    {"id": WizardStep.DETAILS, "title": "Details", "description": "Dates & storage"},
    {"id": WizardStep.IMAGES, "title": "Images", "description": "Product photos"},
    {"id": WizardStep.REVIEW, "title": "Review", "description": "Final check"},
]

STEP_ORDER = [step["id"] for step in STEPS]

STEP_SCHEMAS = {
    WizardStep.BASIC: BasicInfo,
    WizardStep.PRICING: QuantityPricing,
    WizardStep.DETAILS: ProductDetails,
}


def step_errors(step: WizardStep, form_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Field errors that keep ``step`` from being complete. Empty means valid."""
    if step == WizardStep.REVIEW:
        errors = []
        for earlier in STEP_ORDER[:-1]:
            errors.extend(step_errors(earlier, form_data))
        return errors

    if step == WizardStep.IMAGES:
        schema, data = ProductImages, {"images": form_data[WizardStep.IMAGES]}
    else:
        schema, data = STEP_SCHEMAS[step], form_data[step]

    try:
        schema.model_validate(data)
    except PydanticValidationError as exc:
        return format_errors(exc)
    return []
