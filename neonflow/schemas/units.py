"""
Unit catalogs.
A unit is a named multiple of an item's base counting unit (ratio = 1).
"""
from pydantic import BaseModel, Field


class UnitDefinition(BaseModel):
    name: str = Field(min_length=1, max_length=32)
    ratio: int = Field(gt=0)


STOCK_UNITS = [
    UnitDefinition(name='Pcs', ratio=1),
    UnitDefinition(name='Dozen (12x)', ratio=12),
    UnitDefinition(name='Box (24x)', ratio=24),
    UnitDefinition(name='Crate (50x)', ratio=50),
]

# Reject units are labels only, every ratio is 1
REJECT_UNITS = [
    UnitDefinition(name=name, ratio=1)
    for name in ('Pcs', 'Kg', 'Liter', 'Karung', 'Ikat', 'Kardus', 'Jerrycan')
]


def find_unit(name, catalog=None):
    """Unit by name, falling back to the first (base) unit of the catalog"""
    catalog = catalog or STOCK_UNITS
    for unit in catalog:
        if unit.name == name:
            return unit
    return catalog[0]
