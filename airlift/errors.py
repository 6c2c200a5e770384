"""Airlift-specific exceptions.

Ordinary capacity shortfalls never raise; they are reported through
``AllocationResult``. These exceptions cover bad configuration and bad input.
"""


class AirliftError(Exception):
    """Base exception for all airlift errors."""


class ProfileConfigError(AirliftError):
    """Raised when an aircraft profile is malformed or unknown."""

    def __init__(self, aircraft_type: str, reason: str):
        self.aircraft_type = aircraft_type
        self.reason = reason
        super().__init__(f"{aircraft_type}: {reason}")


class ManifestError(AirliftError):
    """Raised when a cargo manifest cannot be read or validated."""


class SolverConfigurationError(AirliftError):
    """Raised by ``ServiceResult.unwrap()`` when a solve was rejected up front."""

    def __init__(self, code: str, message: str):
        self.code = code
        super().__init__(message)


class SettingsError(AirliftError):
    """Raised when an environment setting holds an unusable value."""

    def __init__(self, name: str, value: str, reason: str):
        self.name = name
        self.value = value
        super().__init__(f"{name}={value!r}: {reason}")
