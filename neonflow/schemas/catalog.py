from datetime import date
from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .base import coerce_date

ITEM_STATUSES = ('In Stock', 'Low Stock', 'Out of Stock', 'Discontinued')


class StockItemIn(BaseModel):
    """One catalog row for the bulk upsert endpoint"""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=128)
    sku: str = Field(min_length=1, max_length=64)
    category: str = 'General'
    quantity: int = Field(default=0, ge=0)
    price: float = Field(default=0.0, ge=0)
    status: Optional[str] = None
    last_updated: Optional[date] = Field(default=None,
                                         validation_alias=AliasChoices('last_updated', 'lastUpdated'))

    @field_validator('status')
    @classmethod
    def known_status(cls, value):
        if value is not None and value not in ITEM_STATUSES:
            raise ValueError(f"status must be one of {', '.join(ITEM_STATUSES)}")
        return value

    @field_validator('last_updated', mode='before')
    @classmethod
    def strip_time(cls, value):
        return coerce_date(value) or None
