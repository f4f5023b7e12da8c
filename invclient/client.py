# invclient/client.py
import httpx
import requests
from typing import Optional, Dict, Any, List

DEFAULT_BASE_URL = "http://127.0.0.1:8085"
PRODUCTS_PATH = "/api/products"


class InventoryApiError(Exception):
    """Non-2xx response from the inventory API."""

    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(f"HTTP {status_code} {code}: {message}")
        self.status_code = status_code
        self.code = code
        self.message = message


def _check(r) -> Any:
    # Works for both requests and httpx responses
    if r.status_code >= 400:
        try:
            body = r.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        raise InventoryApiError(
            r.status_code,
            body.get("code", "http_error"),
            body.get("error", r.text or f"HTTP {r.status_code}"),
        )
    return r.json()


def _product_payload(name: str, price: float, quantity: int, category: Optional[str]) -> Dict[str, Any]:
    return {"name": name, "price": price, "quantity": quantity, "category": category or ""}


class InventoryClient:
    """
    Thin client for the /api/products endpoints.

    ``session`` defaults to a ``requests.Session``; anything with the same
    get/post/put/delete signature works (the tests pass a FastAPI TestClient).
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: int = 10, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def _url(self, product_id: Optional[str] = None) -> str:
        url = f"{self.base_url}{PRODUCTS_PATH}"
        if product_id is not None:
            url = f"{url}/{product_id}"
        return url

    def list_products(self) -> List[Dict[str, Any]]:
        r = self.session.get(self._url(), timeout=self.timeout)
        return _check(r)

    def create_product(self, name: str, price: float, quantity: int, category: Optional[str] = "") -> Dict[str, Any]:
        r = self.session.post(self._url(), json=_product_payload(name, price, quantity, category), timeout=self.timeout)
        return _check(r)

    def update_product(self, product_id: str, name: str, price: float, quantity: int,
                       category: Optional[str] = "") -> Dict[str, Any]:
        r = self.session.put(self._url(product_id), json=_product_payload(name, price, quantity, category),
                             timeout=self.timeout)
        return _check(r)

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        r = self.session.delete(self._url(product_id), timeout=self.timeout)
        return _check(r)

    def health(self) -> Dict[str, Any]:
        r = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
        return _check(r)

    # Async listing (example)
    async def list_products_async(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> List[Dict[str, Any]]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=transport) as client:
            r = await client.get(self._url())
            return _check(r)
