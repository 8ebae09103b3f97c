from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotApplicableError(ServiceError):
    """Fee type does not apply to the student's class (resolved amount is zero)."""

    def __init__(self, message: str = "This fee is not applicable to the selected student") -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class InvalidAmountError(ServiceError):
    """Payment amount is non-positive or exceeds the resolved full amount."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class StoreUnavailableError(ServiceError):
    """Backing store call failed. Surfaced as-is, never retried here."""

    def __init__(self, message: str = "Fee record store is unavailable") -> None:
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)

