"""
Dispatch error taxonomy.

Services raise these; the API layer renders them as ``{"error": message}``
with the attached HTTP status. Running out of candidate drivers is a
normal response, not an exception.
"""

from fastapi import status


class DispatchError(Exception):
    """Base class for errors surfaced to dispatch callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class OrderNotFoundError(DispatchError):
    """Referenced order does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Order not found") -> None:
        super().__init__(message)


class InvalidOrderStateError(DispatchError):
    """Order cannot be dispatched (vendor unlocated, order closed)."""

    status_code = status.HTTP_400_BAD_REQUEST


class AssignmentConflictError(DispatchError):
    """Order already has a driver, or another request claimed it first."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str = "Order already assigned") -> None:
        super().__init__(message)


class MalformedRequestError(DispatchError):
    """Missing/unknown action or invalid request fields."""

    status_code = status.HTTP_400_BAD_REQUEST


class DependencyFailureError(DispatchError):
    """The data store failed (network, constraint violation)."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class DependencyTimeoutError(DispatchError):
    """The operation did not finish within its deadline."""

    status_code = status.HTTP_504_GATEWAY_TIMEOUT

    def __init__(self, message: str = "Dispatch operation timed out") -> None:
        super().__init__(message)
