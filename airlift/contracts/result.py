"""Outcome wrapper for solver entry points.

Capacity shortfalls are not failures: they come back as ``success=True``
with the shortfall described inside ``data``. ``fail()`` is reserved for
configuration problems detected before any placement starts.
"""

from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorCode:
    """Machine-readable codes carried by ``ServiceError.code``."""

    NO_AIRCRAFT_AVAILABLE = "NO_AIRCRAFT_AVAILABLE"
    # Carried in ``details["cause"]`` when a profile is the reason no aircraft is usable
    INVALID_PROFILE = "INVALID_PROFILE"


class ServiceError(BaseModel):
    """Structured error from a solver call."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, str | int | float | bool | None] | None = None


class ServiceResult(BaseModel, Generic[T]):
    """Generic wrapper for solver responses.

    On success: ``data`` is populated.
    On failure: ``error`` is populated with structured error info.
    """

    success: bool
    data: T | None = None
    error: ServiceError | None = None
    duration_ms: float | None = Field(default=None, ge=0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))

    @classmethod
    def ok(cls, data: T, duration_ms: float | None = None) -> "ServiceResult[T]":
        return cls(success=True, data=data, duration_ms=duration_ms)

    @classmethod
    def fail(
        cls, code: str, message: str, **details: str | int | float | bool | None
    ) -> "ServiceResult[T]":
        return cls(
            success=False,
            error=ServiceError(code=code, message=message, details=details or None),
        )

    def unwrap(self) -> T:
        """Return ``data`` or raise ``SolverConfigurationError`` on failure."""
        if not self.success or self.data is None:
            from airlift.errors import SolverConfigurationError

            err = self.error
            raise SolverConfigurationError(
                err.code if err else ErrorCode.NO_AIRCRAFT_AVAILABLE,
                err.message if err else "solver returned no data",
            )
        return self.data
