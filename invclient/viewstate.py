"""
Client view-state and the pure projections over the product list.

The display mode is one of three states::

    Browsing(filter)      listing products, optionally filtered by category
    Creating(draft)       empty form for a new product
    Editing(id, draft)    form loaded from an existing product

Transitions return new state objects; nothing here talks to the API.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

ALL = "All"
GENERAL = "General"
LOW_STOCK_THRESHOLD = 5


class MissingIdentifier(Exception):
    """The product picked for editing carries no id."""


@dataclass(frozen=True)
class Draft:
    name: str = ""
    price: float = 0.0
    quantity: int = 0
    category: str = ""

    @classmethod
    def from_product(cls, product: Mapping[str, Any]) -> "Draft":
        return cls(
            name=product.get("name") or "",
            price=product.get("price") or 0.0,
            quantity=int(product.get("quantity") or 0),
            category=product.get("category") or "",
        )

    def to_payload(self) -> Dict[str, Any]:
        return {"name": self.name, "price": self.price, "quantity": self.quantity, "category": self.category}


@dataclass(frozen=True)
class Browsing:
    filter: str = ALL


@dataclass(frozen=True)
class Creating:
    draft: Draft = field(default_factory=Draft)
    return_filter: str = ALL


@dataclass(frozen=True)
class Editing:
    id: str
    draft: Draft
    return_filter: str = ALL


ViewState = Union[Browsing, Creating, Editing]


# ---------------------------
# Transitions
# ---------------------------
def start_add(state: ViewState) -> Creating:
    return Creating(draft=Draft(), return_filter=_current_filter(state))


def start_edit(state: ViewState, product: Mapping[str, Any]) -> Editing:
    product_id = product.get("id")
    if not product_id:
        raise MissingIdentifier("Error: This product has no ID!")
    return Editing(id=product_id, draft=Draft.from_product(product), return_filter=_current_filter(state))


def back_to_list(state: ViewState) -> Browsing:
    """Leave the form, after a successful save or on cancel."""
    return Browsing(filter=_current_filter(state))


def set_filter(state: ViewState, category: str) -> Browsing:
    if not isinstance(state, Browsing):
        raise ValueError("the category filter can only change while browsing")
    return Browsing(filter=category or ALL)


def edit_draft(state: ViewState, **fields) -> ViewState:
    if isinstance(state, Browsing):
        raise ValueError("no form is open")
    return replace(state, draft=replace(state.draft, **fields))


def _current_filter(state: ViewState) -> str:
    if isinstance(state, Browsing):
        return state.filter
    return state.return_filter


# ---------------------------
# Quantity stepper
# ---------------------------
def increase_qty(draft: Draft) -> Draft:
    return replace(draft, quantity=int(draft.quantity or 0) + 1)


def decrease_qty(draft: Draft) -> Draft:
    # Client-side clamp only; the API enforces its own bound
    return replace(draft, quantity=max(0, int(draft.quantity or 0) - 1))


# ---------------------------
# Projections
# ---------------------------
def display_category(product: Mapping[str, Any]) -> str:
    return product.get("category") or GENERAL


def visible_products(products: Sequence[Mapping[str, Any]], category: Optional[str] = ALL) -> List[Mapping[str, Any]]:
    """Products shown under the filter. Matches on display category, so "General"
    also selects products whose category is empty or missing."""
    if not category or category == ALL:
        return list(products)
    return [p for p in products if display_category(p) == category]


def group_by_category(products: Sequence[Mapping[str, Any]]) -> Dict[str, List[Mapping[str, Any]]]:
    groups: Dict[str, List[Mapping[str, Any]]] = {}
    for p in products:
        groups.setdefault(display_category(p), []).append(p)
    return groups


def category_options(products: Sequence[Mapping[str, Any]]) -> List[str]:
    return list(dict.fromkeys(display_category(p) for p in products))


def is_low_stock(product: Mapping[str, Any]) -> bool:
    return (product.get("quantity") or 0) < LOW_STOCK_THRESHOLD
