"""Headless controller for the five-step product listing wizard.

The wizard only ever moves one step at a time. ``next`` is refused until the
current step validates, and ``previous`` is refused on the first step. Saving a
draft never moves the wizard. Network failures become error notifications and
are not retried.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from attrs import define
from loguru import logger
from pydantic.alias_generators import to_snake
from pydantic_core import to_jsonable_python

from agroconnect.client import ApiError, MarketplaceClient
from agroconnect.utils.product_utils import format_price, format_total_value
from agroconnect.wizard.steps import STEP_ORDER, STEP_SCHEMAS, STEPS, WizardStep, step_errors


@define
class Notification:
    level: str
    message: str


class ProductWizard:
    def __init__(
        self,
        client: MarketplaceClient,
        initial_data: Optional[Dict[str, Any]] = None,
        draft_id: Optional[int] = None,
    ):
        self.client = client
        self.draft_id = draft_id
        self.step_index = 0
        self.notifications: List[Notification] = []
        self.created_product: Optional[Dict[str, Any]] = None
        self.is_saving = False
        self.is_submitting = False

        initial_data = initial_data or {}
        self.form_data: Dict[str, Any] = {
            WizardStep.BASIC: {},
            WizardStep.PRICING: {},
            WizardStep.DETAILS: {},
            WizardStep.IMAGES: list(initial_data.get(WizardStep.IMAGES, [])),
        }
        for step in (WizardStep.BASIC, WizardStep.PRICING, WizardStep.DETAILS):
            self.update(initial_data.get(step, {}), step=step)

    @classmethod
    def from_draft(cls, client: MarketplaceClient, draft: Dict[str, Any]) -> "ProductWizard":
        """Resume editing a saved draft (as returned by the drafts API)."""
        fields = {to_snake(key): value for key, value in draft.items() if value is not None}
        wizard = cls(client, draft_id=fields.get("id"))
        for step in (WizardStep.BASIC, WizardStep.PRICING, WizardStep.DETAILS):
            names = _step_fields(step)
            wizard.update({key: value for key, value in fields.items() if key in names}, step=step)
        wizard.set_images(fields.get("images") or [])
        return wizard

    @property
    def current_step(self) -> WizardStep:
        return STEP_ORDER[self.step_index]

    # form data

    def update(self, data: Dict[str, Any], step: Optional[WizardStep] = None) -> None:
        """Merge field values into a step's section (the current step by default)."""
        step = WizardStep(step or self.current_step)
        if step in (WizardStep.IMAGES, WizardStep.REVIEW):
            raise ValueError(f"Step '{step}' has no form fields")
        self.form_data[step].update({to_snake(key): value for key, value in data.items()})

    def set_images(self, urls: Iterable[str]) -> None:
        self.form_data[WizardStep.IMAGES] = list(urls)

    def remove_image(self, url: str) -> None:
        self.form_data[WizardStep.IMAGES] = [image for image in self.form_data[WizardStep.IMAGES] if image != url]

    async def upload_images(self, files: Iterable[Tuple[str, bytes, str]]) -> bool:
        try:
            uploaded = await self.client.upload_images(files)
        except ApiError as exc:
            self._notify("error", exc.message)
            return False
        self.form_data[WizardStep.IMAGES].extend(image["url"] for image in uploaded)
        return True

    def merged_data(self) -> Dict[str, Any]:
        return {
            **self.form_data[WizardStep.BASIC],
            **self.form_data[WizardStep.PRICING],
            **self.form_data[WizardStep.DETAILS],
            "images": list(self.form_data[WizardStep.IMAGES]),
        }

    # navigation

    def errors(self, step: Optional[WizardStep] = None) -> List[Dict[str, str]]:
        return step_errors(WizardStep(step or self.current_step), self.form_data)

    def is_step_valid(self, step: Optional[WizardStep] = None) -> bool:
        return not self.errors(step)

    @property
    def can_go_next(self) -> bool:
        return self.current_step != WizardStep.REVIEW and self.is_step_valid()

    @property
    def can_go_previous(self) -> bool:
        return self.step_index > 0

    def next(self) -> bool:
        if not self.can_go_next:
            return False
        self.step_index += 1
        return True

    def previous(self) -> bool:
        if not self.can_go_previous:
            return False
        self.step_index -= 1
        return True

    def progress(self) -> List[Dict[str, str]]:
        states = []
        for index, step in enumerate(STEPS):
            if index < self.step_index:
                state = "completed"
            elif index == self.step_index:
                state = "current"
            else:
                state = "upcoming"
            states.append({"id": str(step["id"]), "title": step["title"], "state": state})
        return states

    # persistence

    async def save_draft(self) -> bool:
        payload = to_jsonable_python(self.merged_data())
        self.is_saving = True
        try:
            if self.draft_id is None:
                draft = await self.client.create_draft(payload)
                self.draft_id = draft["id"]
            else:
                await self.client.update_draft(self.draft_id, payload)
        except ApiError as exc:
            logger.warning(f"Saving draft failed: {exc}")
            self._notify("error", f"Failed to save draft: {exc.message}")
            return False
        finally:
            self.is_saving = False

        self._notify("success", "Draft saved")
        return True

    async def submit(self) -> bool:
        if self.current_step != WizardStep.REVIEW:
            return False
        if self.created_product is not None:
            self._notify("error", "This product has already been submitted")
            return False
        if not self.is_step_valid(WizardStep.REVIEW):
            self._notify("error", "Please complete all required fields before submitting")
            return False

        payload = to_jsonable_python(self.merged_data())
        self.is_submitting = True
        try:
            self.created_product = await self.client.create_product(payload, draft_id=self.draft_id)
        except ApiError as exc:
            logger.warning(f"Submitting product failed: {exc}")
            self._notify("error", f"Failed to create product: {exc.message}")
            return False
        finally:
            self.is_submitting = False

        self.draft_id = None
        self._notify("success", "Product created successfully")
        return True

    # review

    def review_summary(self) -> Dict[str, Any]:
        data = self.merged_data()
        quantity = data.get("quantity_available") or 0
        price = data.get("price_per_unit") or 0
        return {
            "title": data.get("title"),
            "crop_type": data.get("crop_type"),
            "variety": data.get("variety"),
            "quality_grade": data.get("quality_grade"),
            "quantity": f"{quantity} {data.get('unit') or ''}".strip(),
            "price_per_unit": format_price(float(price)),
            "total_value": format_total_value(float(quantity), float(price)),
            "image_count": len(data["images"]),
        }

    def _notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level=level, message=message))


def _step_fields(step: WizardStep):
    return set(STEP_SCHEMAS[step].model_fields)
