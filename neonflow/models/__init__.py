# Imported in dependency order
from .base import BaseModel, generate_id
from .auth import User
from .catalog import StockItem
from .movement import Movement, MovementLine
from .reject import RejectMasterItem, RejectRecord, RejectLine
from .sys import AuditLog, PlaylistItem
