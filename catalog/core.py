from dataclasses import dataclass
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List

MISSING_FIELDS_MESSAGE = "Missing required fields: name, price, category"


# Creation fields are optional at the schema level: presence is checked by
# validate_product so a missing field yields 400 with a readable message.
class VariantIn(BaseModel):
    color: Optional[str] = None
    size: Optional[str] = None
    stock: int = 0

class ProductIn(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    category: Optional[str] = None
    variants: Optional[List[VariantIn]] = None

class VariantStockIn(BaseModel):
    color: str
    size: str
    stock: int

class VariantKeyIn(BaseModel):
    color: str
    size: str


@dataclass
class ValidationResult:
    """Either a product document ready to insert, or the reason it was rejected."""

    product: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _make_variant_dict(v: VariantIn) -> Dict[str, Any]:
    return {"color": v.color, "size": v.size, "stock": v.stock}

def _make_product_dict(p: ProductIn) -> Dict[str, Any]:
    return {
        "name": p.name,
        "price": p.price,
        "category": p.category,
        "variants": [_make_variant_dict(v) for v in (p.variants or [])],
    }


def validate_product(p: ProductIn) -> ValidationResult:
    # Falsy check on purpose: a price of 0 is rejected like a missing one.
    if not p.name or not p.price or not p.category:
        return ValidationResult(error=MISSING_FIELDS_MESSAGE)

    seen = set()
    for v in p.variants or []:
        if not v.color or not v.size:
            return ValidationResult(error="Missing required variant fields: color, size")
        key = (v.color, v.size)
        if key in seen:
            return ValidationResult(error=f"Duplicate variant: color={v.color}, size={v.size}")
        seen.add(key)

    return ValidationResult(product=_make_product_dict(p))
