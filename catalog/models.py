# catalog/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class Variant(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    color: str
    size: str
    stock: int = 0


class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    name: str
    price: float
    category: str
    variants: List[Variant] = []


class UpdateOutcome(BaseModel):
    """Raw outcome of a single-document update, keyed the way the driver reports it."""

    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    matched_count: int = Field(alias="matchedCount")
    modified_count: int = Field(alias="modifiedCount")
    upserted_count: int = Field(default=0, alias="upsertedCount")
    upserted_id: Optional[str] = Field(default=None, alias="upsertedId")
