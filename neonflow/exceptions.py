class NeonFlowException(Exception):
    """Base exception for the NeonFlow service layer"""
    def __init__(self, message, code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['code'] = self.code
        rv['success'] = False
        return rv


class ValidationError(NeonFlowException):
    """Malformed payload, rejected before anything is persisted"""
    def __init__(self, message="Invalid data", payload=None):
        super().__init__(message, code=400, payload=payload)


class PermissionDenied(NeonFlowException):
    def __init__(self, message="Access denied", payload=None):
        super().__init__(message, code=403, payload=payload)


class RecordNotFound(NeonFlowException):
    def __init__(self, message="Record not found", payload=None):
        super().__init__(message, code=404, payload=payload)


class ItemNotFound(RecordNotFound):
    """A movement line references a catalog item that does not exist"""
    def __init__(self, item_id, name=None):
        label = name or item_id
        super().__init__(f"Item {label} not found", payload={'item_id': item_id, 'item': label})
        self.item_id = item_id
        self.name = label


class InsufficientStock(NeonFlowException):
    """Applying a delta would drive an item's quantity below zero"""
    def __init__(self, name, current, requested):
        super().__init__(
            f"Stock insufficient for {name}: current {current}, requested {requested}",
            code=409,
            payload={'item': name, 'current': current, 'requested': requested}
        )
        self.name = name
        self.current = current
        self.requested = requested


class ConcurrencyConflict(NeonFlowException):
    """The item rows kept changing underneath us after all retries"""
    def __init__(self, message="Stock was modified concurrently, please retry", payload=None):
        super().__init__(message, code=409, payload=payload)
