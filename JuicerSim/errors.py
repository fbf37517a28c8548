"""
Error kinds raised by the juicer core
"""


class JuicerError(Exception):
    """Base class for every failure raised by the juicer core"""

    error_type = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StateError(JuicerError, RuntimeError):
    """Operation invoked from a state that forbids it"""

    error_type = "state_error"


class MaintenanceError(StateError):
    """A press or filter unit has exhausted its service life"""

    error_type = "maintenance_error"


class ValidationError(JuicerError, ValueError):
    """Malformed construction input (unknown tag, negative amount)"""

    error_type = "validation_error"


class CapacityOverflowError(JuicerError, OverflowError):
    """Juice tank or waste bin would exceed its capacity"""

    error_type = "overflow_error"


def classify_error(error: Exception) -> str:
    """Map an exception to the error_type label used by the front ends"""
    if isinstance(error, JuicerError):
        return error.error_type
    return "internal_error"
