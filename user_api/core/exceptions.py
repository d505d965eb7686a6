from typing import Optional, Any

class UserApiError(Exception):
    """
    Base exception for the User API.

    `message` is the short headline returned to the client,
    `error` the human-readable detail.
    """
    def __init__(
        self,
        message: str,
        error: Optional[str] = None,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[Any] = None
    ):
        self.message = message
        self.error = error if error is not None else message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ValidationError(UserApiError):
    """
    Raised when one or more user fields violate their rules.
    """
    def __init__(self, error: str = "Validation failed", details: Optional[Any] = None):
        super().__init__("Validation Error", error=error, code="VALIDATION_ERROR", status_code=400, details=details)

class DuplicateKeyError(UserApiError):
    """
    Raised when the store rejects a write on its unique email index.
    """
    def __init__(self, error: str = "This email is already registered", details: Optional[Any] = None):
        super().__init__("Email already exists", error=error, code="DUPLICATE_KEY", status_code=400, details=details)

class InvalidIdError(UserApiError):
    """
    Raised when an identifier is not a well-formed ObjectId.
    """
    def __init__(self, user_id: str):
        super().__init__(
            "Invalid user ID format",
            error=f"'{user_id}' is not a valid user ID",
            code="INVALID_ID",
            status_code=400
        )

class InvalidBodyError(UserApiError):
    """
    Raised when a write request body is not a JSON object.
    """
    def __init__(self, error: str = "Request body must be a JSON object"):
        super().__init__("Invalid request body", error=error, code="INVALID_BODY", status_code=400)

class ResourceNotFoundError(UserApiError):
    """
    Raised when a requested user does not exist.
    """
    def __init__(self, message: str = "User not found", error: Optional[str] = None):
        super().__init__(message, error=error, code="NOT_FOUND", status_code=404)

class StoreUnavailableError(UserApiError):
    """
    Raised when the document store fails (connectivity loss or any other driver error).
    """
    def __init__(self, message: str = "Database unavailable", error: Optional[str] = None):
        super().__init__(message, error=error, code="STORE_UNAVAILABLE", status_code=500)
