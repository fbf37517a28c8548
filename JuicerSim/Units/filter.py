"""
Filter unit: strains raw juice, clogging and wearing with every pass
"""

import logging
from typing import Dict, Any

from .base import ProcessingUnit, clamp_level, MAX_LEVEL
from ..errors import StateError, MaintenanceError
from ..models import JuiceVolume, FilterState

logger = logging.getLogger(__name__)


class FilterUnit(ProcessingUnit):
    """Juice filter with a sticky clogged state"""

    idle_state = FilterState.IDLE

    MAX_FILTERS = 500
    WEAR_PER_FILTER = 0.2
    CLOG_PER_FILTER = 5
    CLOG_THRESHOLD = 80
    MIN_EFFICIENCY = 0.8

    def __init__(self, unit_id: str = "filter_1", max_filters: int = MAX_FILTERS,
                 wear_per_filter: float = WEAR_PER_FILTER,
                 clog_per_filter: float = CLOG_PER_FILTER,
                 clog_threshold: float = CLOG_THRESHOLD):
        super().__init__(unit_id)
        self.max_filters = max_filters
        self.wear_per_filter = wear_per_filter
        self.clog_per_filter = clog_per_filter
        self.clog_threshold = clog_threshold
        self.filter_count = 0
        self.clog_level = 0.0

    @property
    def efficiency(self) -> float:
        return self._efficiency_at(self.wear_level)

    def _efficiency_at(self, wear_level: float) -> float:
        return max(1 - wear_level / 200, self.MIN_EFFICIENCY)

    def is_filtering(self) -> bool:
        return self._state == FilterState.FILTERING

    def is_clogged(self) -> bool:
        return self._state == FilterState.CLOGGED

    def needs_cleaning(self) -> bool:
        return self.clog_level >= self.clog_threshold

    def needs_replacement(self) -> bool:
        return self.filter_count >= self.max_filters or self.wear_level >= MAX_LEVEL

    def filter(self, juice_volume: JuiceVolume) -> JuiceVolume:
        """Filter one batch of raw juice and return the filtered volume

        Crossing the clog threshold leaves the unit clogged even though the
        batch itself went through; only clean() clears it.
        """
        if self.is_clogged():
            raise StateError("Filter clogged")
        if not self.is_idle():
            raise StateError("Filter not idle")
        if self.needs_replacement():
            raise MaintenanceError("Filter needs replacement")

        with self._operating(FilterState.FILTERING):
            wear_level = clamp_level(self.wear_level + self.wear_per_filter)
            filtered = juice_volume * self._efficiency_at(wear_level)

            self.filter_count += 1
            self.wear_level = wear_level
            self.clog_level = clamp_level(self.clog_level + self.clog_per_filter)

            if self.needs_cleaning():
                self._state = FilterState.CLOGGED
                logger.warning(f"{self.unit_id}: clogged at {self.clog_level}%")

        return filtered

    def clean(self):
        """Clear the clog; wear and filter count are kept"""
        self.clog_level = 0.0
        self._state = FilterState.IDLE

    def replace_filter(self):
        self.wear_level = 0.0
        self.filter_count = 0
        self.clog_level = 0.0
        self._state = FilterState.IDLE
        logger.info(f"{self.unit_id}: filter replaced")

    def get_status(self) -> Dict[str, Any]:
        return {
            "state": self._state.value,
            "filter_count": self.filter_count,
            "clog_level": round(self.clog_level, 2),
            "wear_percentage": self.wear_percentage,
            "efficiency_percentage": self.efficiency_percentage,
            "needs_cleaning": self.needs_cleaning(),
            "needs_replacement": self.needs_replacement(),
        }
