"""
Movement payload schemas.
Accepts both snake_case and the camelCase keys the browser client sends
(itemId, orderQuantity, selectedUnit, referenceNumber, photos, type, items).
"""
from datetime import date
from typing import List, Literal, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .base import coerce_date


class LineIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    item_id: str = Field(min_length=1, validation_alias=AliasChoices('item_id', 'itemId', 'id'))
    name: Optional[str] = None
    order_quantity: int = Field(ge=1, validation_alias=AliasChoices('order_quantity', 'orderQuantity'))
    unit_name: str = Field(default='Pcs', validation_alias=AliasChoices('unit_name', 'unitName'))
    unit_ratio: int = Field(default=1, gt=0, validation_alias=AliasChoices('unit_ratio', 'unitRatio'))

    @model_validator(mode='before')
    @classmethod
    def flatten_selected_unit(cls, data):
        if not isinstance(data, dict):
            return data
        unit = data.get('selected_unit', data.get('selectedUnit'))
        if isinstance(unit, dict):
            data = dict(data)
            data.setdefault('unit_name', unit.get('name', 'Pcs'))
            if 'unit_ratio' not in data and 'unitRatio' not in data:
                data['unit_ratio'] = unit.get('ratio')
        return data

    @property
    def base_units(self):
        return self.order_quantity * self.unit_ratio


class MovementCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: Optional[str] = Field(default=None, max_length=64)
    date: date
    direction: Literal['IN', 'OUT'] = Field(validation_alias=AliasChoices('direction', 'type'))
    lines: List[LineIn] = Field(min_length=1, validation_alias=AliasChoices('lines', 'items'))
    reference_number: str = Field(default='', max_length=64,
                                  validation_alias=AliasChoices('reference_number', 'referenceNumber'))
    notes: str = ''
    attachments: List[str] = Field(default_factory=list, validation_alias=AliasChoices('attachments', 'photos'))

    @field_validator('date', mode='before')
    @classmethod
    def strip_time(cls, value):
        return coerce_date(value)

    @field_validator('direction', mode='before')
    @classmethod
    def upper_direction(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator('reference_number', 'notes', mode='before')
    @classmethod
    def none_to_empty(cls, value):
        return '' if value is None else value

    @property
    def total_base_units(self):
        return sum(line.base_units for line in self.lines)
