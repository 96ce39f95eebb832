class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ImportBusyError(AppError):
    """Raised when a schedule import for the same scope is already running."""
    def __init__(self, scope_key: str):
        self.scope_key = scope_key
        super().__init__(
            f"Import already running for {scope_key}. Try again later.",
            status_code=409,
            details={"scope": scope_key, "reason": "busy"},
        )

class EventStoreError(AppError):
    """Raised when the event store cannot complete a read or write."""
    def __init__(self, operation: str, message: str = "Event store operation failed"):
        self.operation = operation
        super().__init__(message, status_code=503, details={"operation": operation})

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)
