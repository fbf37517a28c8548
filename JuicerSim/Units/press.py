"""
Press unit: turns a fruit into raw juice and waste, wearing down with use
"""

import logging
from datetime import datetime
from typing import Dict, Any, Optional

from .base import ProcessingUnit, clamp_level, MAX_LEVEL
from ..errors import StateError, MaintenanceError
from ..models import Fruit, PressResult, PressState

logger = logging.getLogger(__name__)


class PressUnit(ProcessingUnit):
    """Mechanical press with wear-based efficiency loss"""

    idle_state = PressState.IDLE

    MAX_PRESSES = 1000
    WEAR_PER_PRESS = 0.1
    MIN_EFFICIENCY = 0.5

    def __init__(self, unit_id: str = "press_1", max_presses: int = MAX_PRESSES,
                 wear_per_press: float = WEAR_PER_PRESS):
        super().__init__(unit_id)
        self.max_presses = max_presses
        self.wear_per_press = wear_per_press
        self.press_count = 0
        self.last_press_time: Optional[datetime] = None
        self.fault_reason: Optional[str] = None

    @property
    def efficiency(self) -> float:
        return self._efficiency_at(self.wear_level)

    def _efficiency_at(self, wear_level: float) -> float:
        return max(1 - wear_level / 100, self.MIN_EFFICIENCY)

    def is_pressing(self) -> bool:
        return self._state == PressState.PRESSING

    def is_error(self) -> bool:
        return self._state == PressState.ERROR

    def needs_maintenance(self) -> bool:
        """Service life exhausted by cycle count or wear"""
        return self.press_count >= self.max_presses or self.wear_level >= MAX_LEVEL

    def maintenance_required(self) -> bool:
        return self.needs_maintenance()

    def press(self, fruit: Fruit) -> PressResult:
        """Press one fruit; press_count only moves when a result is returned"""
        if not self.is_idle():
            raise StateError("Press unit not idle")
        if self.needs_maintenance():
            raise MaintenanceError("Press unit needs maintenance")

        with self._operating(PressState.PRESSING):
            wear_level = clamp_level(self.wear_level + self.wear_per_press)
            efficiency = self._efficiency_at(wear_level)

            juice = fruit.potential_juice_volume()
            waste = fruit.potential_waste()

            self.wear_level = wear_level
            self.press_count += 1
            self.last_press_time = datetime.now()

        return PressResult(juice=juice * efficiency, waste=waste)

    def trigger_error(self, reason: str = "Press fault"):
        """Put the press in error until reset"""
        self._state = PressState.ERROR
        self.fault_reason = reason
        logger.warning(f"{self.unit_id}: fault raised ({reason})")

    def reset(self):
        self._state = PressState.IDLE
        self.fault_reason = None

    def perform_maintenance(self):
        """Restore the press to factory condition"""
        self.wear_level = 0.0
        self.press_count = 0
        self.reset()
        logger.info(f"{self.unit_id}: maintenance performed")

    def get_status(self) -> Dict[str, Any]:
        return {
            "state": self._state.value,
            "press_count": self.press_count,
            "wear_percentage": self.wear_percentage,
            "efficiency_percentage": self.efficiency_percentage,
            "needs_maintenance": self.needs_maintenance(),
            "fault_reason": self.fault_reason,
        }
