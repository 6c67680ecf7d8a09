"""
Stock ledger core.

Pure functions over movement data: no session, no I/O. The movement
service feeds them ORM rows; anything with the same attribute shape works
too (MovementCreate schemas, or plain dicts which are validated first).

    movement.date       -> datetime.date
    movement.direction  -> 'IN' | 'OUT'
    movement.lines      -> [line.item_id, line.order_quantity, line.unit_ratio]
"""
from dataclasses import dataclass, field, asdict
from datetime import date
from typing import List, Mapping, Optional, Tuple, Union

from neonflow.exceptions import InsufficientStock
from neonflow.schemas.base import parse_date

DIRECTION_IN = 'IN'
DIRECTION_OUT = 'OUT'

STATUS_IN_STOCK = 'In Stock'
STATUS_LOW_STOCK = 'Low Stock'
STATUS_OUT_OF_STOCK = 'Out of Stock'
STATUS_DISCONTINUED = 'Discontinued'

DEFAULT_LOW_STOCK_THRESHOLD = 20


@dataclass(frozen=True)
class LedgerRow:
    """One historical movement annotated with the balance right after it"""
    date: date
    movement_id: Optional[str]
    direction: str
    reference: str
    note: str
    signed_delta: int
    balance_after: int

    def to_dict(self):
        data = asdict(self)
        data['date'] = self.date.isoformat()
        return data


@dataclass(frozen=True)
class StockCard:
    opening_balance: int
    total_in: int
    total_out: int
    closing_balance: int
    rows: List[LedgerRow] = field(default_factory=list)

    @property
    def net_change(self):
        return self.total_in - self.total_out

    def to_dict(self):
        return {
            'opening_balance': self.opening_balance,
            'total_in': self.total_in,
            'total_out': self.total_out,
            'closing_balance': self.closing_balance,
            'rows': [row.to_dict() for row in self.rows],
        }


def _as_movement(movement):
    # Plain dicts go through the payload schema so they get the same
    # validation (and the same attribute shape) as API input.
    if isinstance(movement, dict):
        from neonflow.schemas import MovementCreate, validate_payload
        return validate_payload(MovementCreate, movement)
    return movement


def derive_status(quantity: int, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> str:
    """
    Status for an on-hand quantity.
    0 -> Out of Stock, below threshold -> Low Stock, else In Stock.
    Every quantity change goes through here, so a hand-set Discontinued
    is replaced on the next movement.
    """
    if quantity <= 0:
        return STATUS_OUT_OF_STOCK
    if quantity < threshold:
        return STATUS_LOW_STOCK
    return STATUS_IN_STOCK


def signed_delta(movement, item_id) -> int:
    """
    Base-unit effect of a movement on one item (IN positive, OUT negative).
    Several lines for the same item are summed; an absent item gives 0.
    """
    if movement is None:
        return 0
    movement = _as_movement(movement)
    units = sum(line.order_quantity * line.unit_ratio
                for line in movement.lines if line.item_id == item_id)
    return units if movement.direction == DIRECTION_IN else -units


def item_ids(*movements) -> List[str]:
    """Distinct item ids across movements, in first-seen order"""
    seen = []
    for movement in movements:
        if movement is None:
            continue
        for line in _as_movement(movement).lines:
            if line.item_id not in seen:
                seen.append(line.item_id)
    return seen


def compute_revision_delta(original, revised, item_id) -> int:
    """
    Net change to an item's live quantity when `original` is replaced by
    `revised`: undo the old effect, apply the new one.
    Either side may be None (creation / deletion).
    """
    return signed_delta(revised, item_id) - signed_delta(original, item_id)


def apply_delta(quantity: int, delta: int, name: str = 'item') -> int:
    """
    New quantity after a delta.
    Never clamps: a negative result raises InsufficientStock and the caller
    must abandon the whole unit of work.
    """
    new_quantity = quantity + delta
    if new_quantity < 0:
        raise InsufficientStock(name, current=quantity, requested=abs(delta))
    return new_quantity


def reconstruct_ledger(current_quantity: int, movements, item_id,
                       date_range: Union[Mapping, Tuple, None] = None) -> StockCard:
    """
    Rebuild the stock card of one item from its movement history.

    Balances are walked back from today's quantity over the *whole* history
    first; the optional (start, end) window (both inclusive) only selects
    which rows are shown and which balances bound the period.

    Args:
        current_quantity: live on-hand quantity of the item
        movements: every recorded movement (ones not touching the item are skipped)
        item_id: catalog id
        date_range: {"start": .., "end": ..} or (start, end); either side may be
            missing or None, ISO strings are parsed

    Returns:
        StockCard with rows newest first
    """
    if isinstance(date_range, Mapping):
        start, end = date_range.get('start'), date_range.get('end')
    else:
        start, end = date_range or (None, None)
    start, end = parse_date(start, 'start'), parse_date(end, 'end')

    # 1. Movements that touch the item, with their signed effect
    entries = []
    for movement in movements:
        movement = _as_movement(movement)
        if not any(line.item_id == item_id for line in movement.lines):
            continue
        entries.append((movement, signed_delta(movement, item_id)))

    # 2. Newest first; sorted() is stable so same-date entries keep input order
    entries = sorted(entries, key=lambda e: e[0].date, reverse=True)

    # 3. Walk back from the live quantity
    running = current_quantity
    ledger = []
    for movement, delta in entries:
        ledger.append(LedgerRow(
            date=movement.date,
            movement_id=getattr(movement, 'id', None),
            direction=movement.direction,
            reference=getattr(movement, 'reference_number', '') or '',
            note=getattr(movement, 'notes', '') or '',
            signed_delta=delta,
            balance_after=running,
        ))
        running -= delta

    # 4. Balance before the earliest recorded movement
    initial_balance = running

    # 5. Window applied after the walk
    visible = [row for row in ledger
               if (start is None or row.date >= start) and (end is None or row.date <= end)]

    # 6. Period totals
    total_in = sum(row.signed_delta for row in visible if row.signed_delta > 0)
    total_out = sum(-row.signed_delta for row in visible if row.signed_delta < 0)

    # 7. Opening balance: state after the newest movement older than start
    opening_balance = initial_balance
    if start is not None:
        previous = next((row for row in ledger if row.date < start), None)
        if previous is not None:
            opening_balance = previous.balance_after

    # 8. Closing balance: state after the newest movement on or before end
    if end is None:
        closing_balance = current_quantity
    else:
        last = next((row for row in ledger if row.date <= end), None)
        closing_balance = last.balance_after if last is not None else initial_balance

    return StockCard(
        opening_balance=opening_balance,
        total_in=total_in,
        total_out=total_out,
        closing_balance=closing_balance,
        rows=visible,
    )
