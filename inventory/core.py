from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Dict, Any

# Fields a client may set; id is assigned by the store and never accepted here.
MUTABLE_FIELDS = ("name", "price", "quantity", "category")


class ProductIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    quantity: int = Field(ge=0)
    category: Optional[str] = ""

    @field_validator("category")
    @classmethod
    def _blank_category(cls, v: Optional[str]) -> str:
        # Missing categories are stored empty and displayed as "General" by clients
        return v or ""


def _make_product_dict(product_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": product_id,
        "name": fields.get("name"),
        "price": fields.get("price"),
        "quantity": fields.get("quantity"),
        "category": fields.get("category"),
    }
