"""Errors raised by the entity store, the link maintainer and the services"""


class EntityServiceError(Exception):
    """Base exception for entity service errors"""

    def __init__(self, message: str, error_code: str = "ENTITY_ERROR"):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class EntityNotFoundError(EntityServiceError):
    """Raised when an entity is absent or not owned by the caller

    Both cases share one message so that callers cannot test for the
    existence of other owners' entities.
    """

    def __init__(self, collection: str, entity_id=None):
        label = collection.rstrip("s").replace("_", " ")
        super().__init__(f"{label} not found", "NOT_FOUND")
        self.collection = collection
        self.entity_id = entity_id


class ValidationFailedError(EntityServiceError):
    """Raised when a payload or a reference is malformed"""

    def __init__(self, message: str):
        super().__init__(message, "VALIDATION_FAILED")


class StoreUnavailableError(EntityServiceError):
    """Raised when the underlying store call failed"""

    def __init__(self, message: str = "entity store unavailable"):
        super().__init__(message, "STORE_UNAVAILABLE")
