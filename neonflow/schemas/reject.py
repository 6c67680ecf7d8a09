from datetime import date
from typing import List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .base import coerce_date


class RejectMasterIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: Optional[str] = Field(default=None, max_length=64)
    name: str = Field(min_length=1, max_length=128)
    sku: str = Field(default='', max_length=64)
    default_unit: str = Field(default='Pcs', validation_alias=AliasChoices('default_unit', 'defaultUnit'))
    category: str = 'General'


class RejectLineIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    master_id: Optional[str] = Field(default=None, validation_alias=AliasChoices('master_id', 'masterId', 'id'))
    name: str = Field(min_length=1, max_length=128)
    sku: str = ''
    unit_name: str = Field(default='Pcs', validation_alias=AliasChoices('unit_name', 'unitName'))
    order_quantity: int = Field(ge=1, validation_alias=AliasChoices('order_quantity', 'orderQuantity'))

    @model_validator(mode='before')
    @classmethod
    def flatten_selected_unit(cls, data):
        if not isinstance(data, dict):
            return data
        unit = data.get('selected_unit', data.get('selectedUnit'))
        if isinstance(unit, dict):
            data = dict(data, unit_name=unit.get('name', 'Pcs'))
        elif isinstance(unit, str):
            data = dict(data, unit_name=unit)
        return data


class RejectRecordCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: Optional[str] = Field(default=None, max_length=64)
    date: date
    outlet_name: str = Field(default='Unknown Outlet', max_length=128, validation_alias=AliasChoices('outlet_name', 'outletName'))
    lines: List[RejectLineIn] = Field(min_length=1, validation_alias=AliasChoices('lines', 'items'))

    @field_validator('date', mode='before')
    @classmethod
    def strip_time(cls, value):
        return coerce_date(value)

    @field_validator('outlet_name', mode='before')
    @classmethod
    def default_outlet(cls, value):
        return (value or '').strip() or 'Unknown Outlet'
