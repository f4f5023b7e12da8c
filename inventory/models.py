# inventory/models.py
from pydantic import BaseModel
from typing import Optional


class Product(BaseModel):
    id: str
    name: str
    price: float
    quantity: int
    category: Optional[str] = ""


class DeleteResult(BaseModel):
    message: str = "Product deleted successfully"
