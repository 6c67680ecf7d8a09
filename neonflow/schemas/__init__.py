from .base import parse_date, validate_payload
from .units import UnitDefinition, STOCK_UNITS, REJECT_UNITS, find_unit
from .movement import LineIn, MovementCreate
from .reject import RejectMasterIn, RejectLineIn, RejectRecordCreate
from .catalog import StockItemIn
