"""
Bounded accumulators: the juice tank and the waste bin
"""

import math
from typing import Dict, Any

from ..errors import CapacityOverflowError, ValidationError
from ..models import JuiceVolume


class JuiceTank:
    """Collects filtered juice up to a fixed capacity"""

    DEFAULT_CAPACITY_ML = 5000

    def __init__(self, capacity_ml: float = DEFAULT_CAPACITY_ML):
        self.capacity = JuiceVolume(capacity_ml)
        self.current_volume = JuiceVolume(0)
        self.juice_count = 0

    def would_overflow(self, volume: JuiceVolume) -> bool:
        return (self.current_volume + volume).milliliters > self.capacity.milliliters

    def check_addition(self, volume: JuiceVolume):
        """Raise if volume cannot be added; never mutates"""
        if not isinstance(volume, JuiceVolume):
            raise ValidationError(f"Expected a JuiceVolume, got {volume!r}")
        if self.would_overflow(volume):
            raise CapacityOverflowError("Tank would overflow")

    def add_juice(self, volume: JuiceVolume):
        self.check_addition(volume)
        self.current_volume = self.current_volume + volume
        self.juice_count += 1

    def empty(self):
        self.current_volume = JuiceVolume(0)

    def is_full(self) -> bool:
        return self.current_volume.milliliters >= self.capacity.milliliters

    @property
    def percentage_full(self) -> float:
        if self.capacity.milliliters == 0:
            return 0.0
        return round(self.current_volume.milliliters / self.capacity.milliliters * 100, 2)

    def get_status(self) -> Dict[str, Any]:
        return {
            "volume": str(self.current_volume),
            "capacity": str(self.capacity),
            "volume_ml": self.current_volume.milliliters,
            "capacity_ml": self.capacity.milliliters,
            "percentage": self.percentage_full,
            "juice_count": self.juice_count,
        }


class WasteBin:
    """Collects peel and pulp waste (grams) up to a fixed capacity"""

    DEFAULT_CAPACITY_GRAMS = 2000

    def __init__(self, capacity_grams: float = DEFAULT_CAPACITY_GRAMS):
        if capacity_grams < 0:
            raise ValidationError("Waste bin capacity cannot be negative")
        self.capacity = capacity_grams
        self.current_waste = 0.0
        self.waste_count = 0

    def would_overflow(self, grams: float) -> bool:
        return self.current_waste + grams > self.capacity

    def check_addition(self, grams: float):
        """Raise if grams cannot be added; never mutates"""
        if isinstance(grams, bool) or not isinstance(grams, (int, float)):
            raise ValidationError(f"Waste must be a number, got {grams!r}")
        if not math.isfinite(grams):
            raise ValidationError(f"Waste must be finite, got {grams!r}")
        if grams <= 0:
            raise ValidationError("Grams must be positive")
        if self.would_overflow(grams):
            raise CapacityOverflowError("Bin would overflow")

    def add_waste(self, grams: float):
        self.check_addition(grams)
        self.current_waste = round(self.current_waste + grams, 2)
        self.waste_count += 1

    def empty(self):
        self.current_waste = 0.0

    def is_full(self) -> bool:
        return self.current_waste >= self.capacity

    @property
    def percentage_full(self) -> float:
        if self.capacity == 0:
            return 0.0
        return round(self.current_waste / self.capacity * 100, 2)

    def get_status(self) -> Dict[str, Any]:
        return {
            "weight": f"{self.current_waste}g",
            "capacity": f"{self.capacity}g",
            "weight_grams": self.current_waste,
            "capacity_grams": self.capacity,
            "percentage": self.percentage_full,
            "waste_count": self.waste_count,
        }
