"""
Movement service: the database boundary of the stock ledger.

Every public mutation runs as one unit of work: the movement row, its
lines and the quantity of every item it touches commit together or not at
all. Item rows are read FOR UPDATE and carry a version counter, so a
concurrent writer either waits on the row lock or makes our flush fail
with StaleDataError, in which case the whole unit is retried.
"""
from flask import current_app
from sqlalchemy import select
from sqlalchemy.orm.exc import StaleDataError

from neonflow.extensions import db
from neonflow.exceptions import (
    ConcurrencyConflict, ItemNotFound, RecordNotFound, ValidationError
)
from neonflow.models import Movement, MovementLine, StockItem, generate_id
from neonflow.schemas import MovementCreate, parse_date, validate_payload
from neonflow.services.ledger_service import (
    apply_delta, compute_revision_delta, item_ids, reconstruct_ledger
)


class MovementService:

    @staticmethod
    def _run_atomic(work, label):
        """
        Run `work()` and commit, rolling back on any error.
        StaleDataError (optimistic lock lost) retries the whole unit.
        """
        attempts = current_app.config.get('MOVEMENT_MAX_RETRIES', 3)
        for attempt in range(1, attempts + 1):
            try:
                result = work()
                db.session.commit()
                return result
            except StaleDataError:
                db.session.rollback()
                current_app.logger.warning(f"{label}: stock changed concurrently (attempt {attempt}/{attempts})")
            except Exception:
                db.session.rollback()
                raise
        raise ConcurrencyConflict(payload={'operation': label})

    @staticmethod
    def _lock_item(item_id):
        return db.session.execute(
            select(StockItem).filter_by(id=item_id).with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    @staticmethod
    def _apply_deltas(deltas, names):
        """
        Apply {item_id: delta} to the catalog.
        Raises ItemNotFound / InsufficientStock on the first bad item; the
        caller's rollback discards whatever was already applied.
        """
        threshold = current_app.config.get('LOW_STOCK_THRESHOLD', 20)
        items = {}
        for item_id, delta in deltas.items():
            # Untouched items are left alone, even if they left the catalog
            if delta == 0:
                continue
            item = MovementService._lock_item(item_id)
            if item is None:
                raise ItemNotFound(item_id, names.get(item_id))
            items[item_id] = item
            item.set_quantity(apply_delta(item.quantity, delta, item.name), threshold)
        return items

    @staticmethod
    def _build_lines(movement, data, items, snapshots=None):
        """Line rows for `data`, snapshotting item details at recording time"""
        snapshots = snapshots or {}
        for position, line in enumerate(data.lines):
            snap = snapshots.get(line.item_id)
            item = items.get(line.item_id)
            source = snap or item
            movement.lines.append(MovementLine(
                position=position,
                item_id=line.item_id,
                name=source.name if source else line.name,
                sku=source.sku if source else None,
                category=source.category if source else None,
                price=source.price if source else 0.0,
                unit_name=line.unit_name,
                unit_ratio=line.unit_ratio,
                order_quantity=line.order_quantity,
            ))

    @staticmethod
    def _line_names(*payloads):
        names = {}
        for payload in payloads:
            if payload is None:
                continue
            for line in payload.lines:
                if line.name and line.item_id not in names:
                    names[line.item_id] = line.name
        return names

    @staticmethod
    def get_movement(movement_id):
        movement = db.session.get(Movement, movement_id)
        if movement is None:
            raise RecordNotFound(f"Transaction {movement_id} not found")
        return movement

    @staticmethod
    def list_movements(direction=None, search=None):
        """Movement history, newest first"""
        query = Movement.query
        if direction:
            if direction not in (Movement.DIRECTION_IN, Movement.DIRECTION_OUT):
                raise ValidationError(f"Unknown direction: {direction}")
            query = query.filter(Movement.direction == direction)
        if search:
            keyword = f"%{search}%"
            query = query.filter(
                Movement.id.ilike(keyword)
                | Movement.reference_number.ilike(keyword)
                | Movement.lines.any(MovementLine.name.ilike(keyword))
            )
        return query.order_by(Movement.date.desc(), Movement.created_at.desc()).all()

    @staticmethod
    def record_movement(payload, user=None):
        """
        Record a new movement and apply it to stock.

        Args:
            payload: dict (API body) or MovementCreate
            user: operator, optional

        Returns:
            the persisted Movement
        """
        data = validate_payload(MovementCreate, payload)
        movement_id = data.id or generate_id('TRX')
        if db.session.get(Movement, movement_id) is not None:
            raise ValidationError(f"Transaction {movement_id} already exists")

        def work():
            deltas = {item_id: compute_revision_delta(None, data, item_id) for item_id in item_ids(data)}
            items = MovementService._apply_deltas(deltas, MovementService._line_names(data))

            movement = Movement(
                id=movement_id,
                date=data.date,
                direction=data.direction,
                total_base_units=data.total_base_units,
                reference_number=data.reference_number,
                notes=data.notes,
                attachments=list(data.attachments),
                created_by_id=getattr(user, 'id', None),
            )
            MovementService._build_lines(movement, data, items)
            db.session.add(movement)
            db.session.flush()
            return movement

        movement = MovementService._run_atomic(work, f"record {movement_id}")
        current_app.logger.info(
            f"Movement {movement.id} recorded: {movement.direction} {movement.total_base_units} units "
            f"across {len(movement.lines)} line(s)"
        )
        return movement

    @staticmethod
    def revise_movement(movement_id, payload, user=None):
        """
        Replace a recorded movement (direction, lines and quantities may all
        change) and reconcile stock: each item gets
        signed_delta(revised) - signed_delta(original).
        Rejected as a whole if any item would go negative.
        """
        revised = validate_payload(MovementCreate, payload)

        def work():
            movement = MovementService.get_movement(movement_id)
            # Deltas must be taken before the lines are replaced
            touched = item_ids(movement, revised)
            deltas = {item_id: compute_revision_delta(movement, revised, item_id) for item_id in touched}
            kept = {line.item_id: _Snapshot.of(line) for line in movement.lines}
            names = MovementService._line_names(revised)
            names.update({line.item_id: line.name for line in movement.lines if line.name})

            items = MovementService._apply_deltas(deltas, names)
            # Items new to this movement are snapshotted from the catalog
            for item_id in item_ids(revised):
                if item_id not in kept and item_id not in items:
                    item = db.session.get(StockItem, item_id)
                    if item is None:
                        raise ItemNotFound(item_id, names.get(item_id))
                    items[item_id] = item

            movement.date = revised.date
            movement.direction = revised.direction
            movement.reference_number = revised.reference_number
            movement.notes = revised.notes
            movement.attachments = list(revised.attachments)
            movement.total_base_units = revised.total_base_units

            movement.lines.clear()
            db.session.flush()
            MovementService._build_lines(movement, revised, items, kept)
            db.session.flush()
            return movement, deltas

        movement, deltas = MovementService._run_atomic(work, f"revise {movement_id}")
        changed = {k: v for k, v in deltas.items() if v}
        current_app.logger.info(f"Movement {movement_id} revised, stock deltas: {changed or 'none'}")
        return movement

    @staticmethod
    def delete_movement(movement_id, user=None):
        """Delete a movement after reverting its effect on stock"""
        def work():
            movement = MovementService.get_movement(movement_id)
            deltas = {item_id: compute_revision_delta(movement, None, item_id) for item_id in item_ids(movement)}
            names = {line.item_id: line.name for line in movement.lines}
            MovementService._apply_deltas(deltas, names)
            db.session.delete(movement)
            db.session.flush()
            return deltas

        MovementService._run_atomic(work, f"delete {movement_id}")
        current_app.logger.info(f"Movement {movement_id} deleted and reverted")

    @staticmethod
    def stock_card(item_id, start=None, end=None):
        """
        Stock card of one item for an optional [start, end] window.

        Returns:
            (StockItem, StockCard)
        """
        item = db.session.get(StockItem, item_id)
        if item is None:
            raise ItemNotFound(item_id)
        start, end = parse_date(start, 'start'), parse_date(end, 'end')
        if start and end and start > end:
            raise ValidationError("start must not be after end")

        # Newest recorded first, so same-day movements walk back in recording order
        movements = Movement.query.filter(
            Movement.lines.any(MovementLine.item_id == item_id)
        ).order_by(Movement.created_at.desc()).all()
        return item, reconstruct_ledger(item.quantity, movements, item_id, (start, end))


class _Snapshot:
    """Detached copy of a line's catalog snapshot"""
    __slots__ = ('name', 'sku', 'category', 'price')

    def __init__(self, name, sku, category, price):
        self.name = name
        self.sku = sku
        self.category = category
        self.price = price

    @classmethod
    def of(cls, line):
        return cls(line.name, line.sku, line.category, line.price)
