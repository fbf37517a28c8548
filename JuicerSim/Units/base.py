"""
Base class for the machine's stateful processing units
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import Enum
from typing import Dict, Any

logger = logging.getLogger(__name__)

MAX_LEVEL = 100.0


def clamp_level(value: float) -> float:
    """Clamp a wear or clog level to [0, 100], kept at 2 decimals"""
    return round(min(max(value, 0.0), MAX_LEVEL), 2)


class ProcessingUnit(ABC):
    """Abstract base class for the press and filter units"""

    idle_state: Enum = None

    def __init__(self, unit_id: str):
        self.unit_id = unit_id
        self._state = self.idle_state
        self.wear_level = 0.0

    @property
    def state(self) -> Enum:
        return self._state

    def is_idle(self) -> bool:
        return self._state == self.idle_state

    @property
    def wear_percentage(self) -> float:
        return round(self.wear_level, 2)

    @property
    @abstractmethod
    def efficiency(self) -> float:
        """Output efficiency factor derived from wear"""
        pass

    @property
    def efficiency_percentage(self) -> float:
        return round(self.efficiency * 100, 2)

    @abstractmethod
    def get_status(self) -> Dict[str, Any]:
        """Read-only snapshot of the unit"""
        pass

    @contextmanager
    def _operating(self, busy_state: Enum):
        """Hold the unit in busy_state for the duration of one operation

        The unit goes back to idle on both normal and exceptional exit,
        unless the operation moved it to another state (e.g. clogged).
        """
        self._state = busy_state
        try:
            yield
        except Exception:
            logger.warning(f"{self.unit_id}: operation aborted, returning to idle")
            raise
        finally:
            if self._state == busy_state:
                self._state = self.idle_state
