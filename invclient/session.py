import logging
from typing import Any, Dict, List, Optional

import requests

from . import viewstate as vs
from .client import InventoryApiError, InventoryClient

logger = logging.getLogger(__name__)

# Errors that end a single client action; no retries
_REQUEST_ERRORS = (InventoryApiError, requests.RequestException)


class ActionFailed(Exception):
    """A save or delete did not go through. Carries a message fit for an alert."""


class InventoryView:
    """
    Holds the last fetched product list and the current view-state.

    The server is authoritative. After every write the list is fetched again,
    unless ``merge_writes`` is set, in which case the record returned by the
    server is merged into the local list by id.
    """

    def __init__(self, client: InventoryClient, merge_writes: bool = False):
        self.client = client
        self.merge_writes = merge_writes
        self.products: List[Dict[str, Any]] = []
        self.state: vs.ViewState = vs.Browsing()

    # ---------------------------
    # Derived view
    # ---------------------------
    @property
    def filter(self) -> str:
        if isinstance(self.state, vs.Browsing):
            return self.state.filter
        return self.state.return_filter

    @property
    def visible(self) -> List[Dict[str, Any]]:
        return vs.visible_products(self.products, self.filter)

    @property
    def groups(self) -> Dict[str, List[Dict[str, Any]]]:
        return vs.group_by_category(self.visible)

    @property
    def categories(self) -> List[str]:
        return vs.category_options(self.products)

    # ---------------------------
    # Reads
    # ---------------------------
    def refresh(self) -> bool:
        """Fetch the full list. On failure the current list is kept."""
        try:
            self.products = self.client.list_products()
        except _REQUEST_ERRORS as e:
            logger.error("Fetching products failed: %s", e)
            return False
        return True

    # ---------------------------
    # View transitions
    # ---------------------------
    def set_filter(self, category: str) -> None:
        self.state = vs.set_filter(self.state, category)

    def start_add(self) -> None:
        self.state = vs.start_add(self.state)

    def start_edit(self, product: Dict[str, Any]) -> None:
        self.state = vs.start_edit(self.state, product)

    def cancel(self) -> None:
        self.state = vs.back_to_list(self.state)

    def edit_draft(self, **fields) -> None:
        self.state = vs.edit_draft(self.state, **fields)

    def increase_qty(self) -> None:
        self.edit_draft(quantity=vs.increase_qty(self._draft()).quantity)

    def decrease_qty(self) -> None:
        self.edit_draft(quantity=vs.decrease_qty(self._draft()).quantity)

    def _draft(self) -> vs.Draft:
        if isinstance(self.state, vs.Browsing):
            raise ValueError("no form is open")
        return self.state.draft

    # ---------------------------
    # Writes
    # ---------------------------
    def save(self) -> Dict[str, Any]:
        state = self.state
        if isinstance(state, vs.Browsing):
            raise ValueError("no form is open")
        payload = state.draft.to_payload()
        try:
            if isinstance(state, vs.Creating):
                product = self.client.create_product(**payload)
            else:
                product = self.client.update_product(state.id, **payload)
        except _REQUEST_ERRORS as e:
            logger.error("Save failed: %s", e)
            raise ActionFailed("Error saving product.") from e

        self._after_write(upsert=product)
        self.state = vs.back_to_list(state)
        return product

    def delete(self, product_id: str) -> None:
        try:
            self.client.delete_product(product_id)
        except _REQUEST_ERRORS as e:
            logger.error("Delete of %s failed: %s", product_id, e)
            raise ActionFailed("Failed to delete product.") from e
        self._after_write(removed=product_id)

    def _after_write(self, upsert: Optional[Dict[str, Any]] = None, removed: Optional[str] = None) -> None:
        if not self.merge_writes:
            self.refresh()
            return
        if upsert is not None:
            for i, p in enumerate(self.products):
                if p.get("id") == upsert.get("id"):
                    self.products[i] = upsert
                    break
            else:
                self.products.append(upsert)
        if removed is not None:
            self.products = [p for p in self.products if p.get("id") != removed]
