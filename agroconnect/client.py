"""Async HTTP client for the marketplace API, used by the listing wizard."""

from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx
from loguru import logger


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, errors: Optional[List[Dict[str, str]]] = None):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        super().__init__(f"{status_code}: {message}")


class MarketplaceClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(base_url=base_url, headers=headers, transport=transport, timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(f"{method} {url} failed: {exc}")
            raise ApiError(0, "Network error, please check your connection") from exc

        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("detail") if isinstance(body, dict) else None
        raise ApiError(response.status_code, message or response.reason_phrase, body.get("errors") if isinstance(body, dict) else None)

    # drafts

    async def create_draft(self, data: Dict[str, Any]) -> Dict[str, Any]:
        body = await self._request("POST", "/api/farmer/drafts", json=data)
        return body["draft"]

    async def update_draft(self, draft_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        body = await self._request("PUT", "/api/farmer/drafts", json={**data, "id": draft_id})
        return body["draft"]

    async def get_draft(self, draft_id: int) -> Dict[str, Any]:
        body = await self._request("GET", "/api/farmer/drafts", params={"id": draft_id})
        return body["draft"]

    async def list_drafts(self) -> List[Dict[str, Any]]:
        body = await self._request("GET", "/api/farmer/drafts")
        return body["drafts"]

    async def delete_draft(self, draft_id: int) -> None:
        await self._request("DELETE", "/api/farmer/drafts", params={"id": draft_id})

    # images

    async def upload_images(self, files: Iterable[Tuple[str, bytes, str]]) -> List[Dict[str, Any]]:
        """Upload ``(filename, content, content_type)`` triples as one batch."""
        multipart = [("images", (name, content, content_type)) for name, content, content_type in files]
        body = await self._request("POST", "/api/farmer/products/images", files=multipart)
        return body["images"]

    async def delete_image(self, file_name: str) -> None:
        await self._request("DELETE", "/api/farmer/products/images", params={"fileName": file_name})

    # products

    async def create_product(self, data: Dict[str, Any], draft_id: Optional[int] = None) -> Dict[str, Any]:
        payload = dict(data)
        if draft_id is not None:
            payload["draftId"] = draft_id
        body = await self._request("POST", "/api/farmer/products", json=payload)
        return body["product"]
