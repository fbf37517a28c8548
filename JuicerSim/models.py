"""
Data models for the commercial citrus juicer simulator
"""

import math
import random
import uuid
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple, Union

from .errors import ValidationError


def _parse_tag(enum_cls, value, label: str):
    """Resolve an enum member from itself or from its string tag"""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        tag = value.strip().lower()
        for member in enum_cls:
            if member.tag == tag:
                return member
    valid = ", ".join(member.tag for member in enum_cls)
    raise ValidationError(f"Invalid {label}: {value!r}. Valid values: {valid}")


class FruitSize(Enum):
    """Fruit sizes with weight range (grams) and juice factor"""
    SMALL = ("small", 80, 120, 0.4)
    MEDIUM = ("medium", 121, 180, 0.5)
    LARGE = ("large", 181, 250, 0.6)

    @property
    def tag(self) -> str:
        return self.value[0]

    @property
    def weight_range(self) -> Tuple[int, int]:
        return self.value[1], self.value[2]

    @property
    def juice_factor(self) -> float:
        return self.value[3]

    @classmethod
    def parse(cls, value: Union["FruitSize", str]) -> "FruitSize":
        return _parse_tag(cls, value, "fruit size")

    @classmethod
    def valid_sizes(cls) -> List[str]:
        return [member.tag for member in cls]


class RipenessLevel(Enum):
    """Ripeness levels with juice extraction factor"""
    UNRIPE = ("unripe", 0.5, "Green, less juice")
    RIPE = ("ripe", 0.8, "Optimal juicing")
    OVERRIPE = ("overripe", 0.7, "Soft, more pulp")

    @property
    def tag(self) -> str:
        return self.value[0]

    @property
    def factor(self) -> float:
        return self.value[1]

    @property
    def description(self) -> str:
        return self.value[2]

    @classmethod
    def parse(cls, value: Union["RipenessLevel", str]) -> "RipenessLevel":
        return _parse_tag(cls, value, "ripeness level")

    @classmethod
    def valid_levels(cls) -> List[str]:
        return [member.tag for member in cls]


class FruitType(Enum):
    """Citrus varieties: juice factor, density (g/ml), peel ratio, display name"""
    ORANGE = ("orange", 0.50, 1.04, 0.30, "Orange")
    LEMON = ("lemon", 0.40, 1.03, 0.35, "Lemon")
    GRAPEFRUIT = ("grapefruit", 0.45, 1.05, 0.40, "Grapefruit")

    @property
    def tag(self) -> str:
        return self.value[0]

    @property
    def juice_factor(self) -> float:
        return self.value[1]

    @property
    def density(self) -> float:
        return self.value[2]

    @property
    def peel_ratio(self) -> float:
        return self.value[3]

    @property
    def display_name(self) -> str:
        return self.value[4]

    def __str__(self) -> str:
        return self.display_name

    @classmethod
    def parse(cls, value: Union["FruitType", str]) -> "FruitType":
        return _parse_tag(cls, value, "fruit type")

    @classmethod
    def valid_types(cls) -> List[str]:
        return [member.tag for member in cls]

    @classmethod
    def default(cls) -> "FruitType":
        return cls.ORANGE


@dataclass(frozen=True)
class JuiceVolume:
    """Non-negative juice quantity in milliliters, kept at 2 decimals"""
    milliliters: float = 0.0

    def __post_init__(self):
        if not isinstance(self.milliliters, (int, float)) or isinstance(self.milliliters, bool):
            raise ValidationError(f"Volume must be a number, got {self.milliliters!r}")
        if not math.isfinite(self.milliliters):
            raise ValidationError(f"Volume must be finite, got {self.milliliters!r}")
        if self.milliliters < 0:
            raise ValidationError("Volume cannot be negative")
        object.__setattr__(self, "milliliters", round(float(self.milliliters), 2))

    def __add__(self, other: "JuiceVolume") -> "JuiceVolume":
        return JuiceVolume(self.milliliters + other.milliliters)

    def __sub__(self, other: "JuiceVolume") -> "JuiceVolume":
        # Truncated subtraction, never below zero
        return JuiceVolume(max(self.milliliters - other.milliliters, 0.0))

    def __mul__(self, factor: float) -> "JuiceVolume":
        return JuiceVolume(self.milliliters * factor)

    __rmul__ = __mul__

    def is_zero(self) -> bool:
        return self.milliliters == 0

    def __str__(self) -> str:
        return f"{self.milliliters} ml"


# Lighter fruits would round to zero waste
MIN_WEIGHT_GRAMS = 1.0


def _new_fruit_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Fruit:
    """A single piece of fruit fed into the machine

    Size, ripeness and fruit type may be given as enum members or string
    tags; unknown tags raise ValidationError. When no weight is supplied a
    random weight inside the size's range is drawn.
    """
    size: FruitSize
    ripeness: RipenessLevel
    fruit_type: FruitType = FruitType.ORANGE
    weight_grams: Optional[float] = None
    id: str = field(default_factory=_new_fruit_id)

    def __post_init__(self):
        size = FruitSize.parse(self.size)
        ripeness = RipenessLevel.parse(self.ripeness)
        fruit_type = FruitType.parse(self.fruit_type)

        weight = self.weight_grams
        if weight is None:
            weight = random.randint(*size.weight_range)
        elif isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise ValidationError(f"Fruit weight must be a number, got {weight!r}")
        elif not math.isfinite(weight):
            raise ValidationError(f"Fruit weight must be finite, got {weight!r}")
        elif weight < MIN_WEIGHT_GRAMS:
            raise ValidationError(f"Fruit weight must be at least {MIN_WEIGHT_GRAMS}g")

        object.__setattr__(self, "size", size)
        object.__setattr__(self, "ripeness", ripeness)
        object.__setattr__(self, "fruit_type", fruit_type)
        object.__setattr__(self, "weight_grams", weight)

    @property
    def type(self) -> str:
        return self.fruit_type.tag

    def potential_juice_volume(self) -> JuiceVolume:
        """Juice obtainable from this fruit before press and filter losses"""
        juice_grams = (self.weight_grams * self.size.juice_factor
                       * self.ripeness.factor * self.fruit_type.juice_factor)
        return JuiceVolume(juice_grams / self.fruit_type.density)

    def potential_waste(self) -> float:
        """Peel plus 10% of the remaining pulp and membranes, in grams"""
        peel = self.weight_grams * self.fruit_type.peel_ratio
        other = (self.weight_grams - peel) * 0.10
        return round(peel + other, 2)


class MachineState(Enum):
    """Juicer machine operational states"""
    IDLE = "idle"
    RUNNING = "running"
    CLEANING = "cleaning"
    ERROR = "error"
    STOPPED = "stopped"


class PressState(Enum):
    """Press unit states"""
    IDLE = "idle"
    PRESSING = "pressing"
    ERROR = "error"


class FilterState(Enum):
    """Filter unit states"""
    IDLE = "idle"
    FILTERING = "filtering"
    CLOGGED = "clogged"


@dataclass(frozen=True)
class PressResult:
    """Output of one press or feed cycle"""
    juice: JuiceVolume
    waste: float  # grams

    def to_dict(self) -> Dict[str, Any]:
        return {"juice": str(self.juice), "waste": f"{self.waste}g",
                "juice_ml": self.juice.milliliters, "waste_grams": self.waste}


@dataclass
class MachineMetrics:
    """Lifetime production counters of a juicer machine"""
    fruits_processed: int = 0
    total_juice_ml: float = 0.0
    total_waste_grams: float = 0.0
    errors: int = 0
    cleaning_cycles: int = 0

    def record_cycle(self, juice: JuiceVolume, waste_grams: float):
        """Account one fully committed feed cycle"""
        self.fruits_processed += 1
        self.total_juice_ml = round(self.total_juice_ml + juice.milliliters, 2)
        self.total_waste_grams = round(self.total_waste_grams + waste_grams, 2)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
