"""
Processing units factory
"""

from typing import Dict, Any, Tuple

from .base import ProcessingUnit, clamp_level
from .press import PressUnit
from .filter import FilterUnit
from .storage import JuiceTank, WasteBin


def build_units(config: Dict[str, Any]) -> Tuple[PressUnit, FilterUnit, JuiceTank, WasteBin]:
    """Create the press, filter, tank and bin described by a config dict"""
    machine_config = config.get("machine", {})
    press_config = config.get("press", {})
    filter_config = config.get("filter", {})

    press_unit = PressUnit(
        max_presses=press_config.get("max_presses", PressUnit.MAX_PRESSES),
        wear_per_press=press_config.get("wear_per_press", PressUnit.WEAR_PER_PRESS),
    )
    filter_unit = FilterUnit(
        max_filters=filter_config.get("max_filters", FilterUnit.MAX_FILTERS),
        wear_per_filter=filter_config.get("wear_per_filter", FilterUnit.WEAR_PER_FILTER),
        clog_per_filter=filter_config.get("clog_per_filter", FilterUnit.CLOG_PER_FILTER),
        clog_threshold=filter_config.get("clog_threshold", FilterUnit.CLOG_THRESHOLD),
    )
    juice_tank = JuiceTank(
        capacity_ml=machine_config.get("juice_tank_capacity_ml", JuiceTank.DEFAULT_CAPACITY_ML)
    )
    waste_bin = WasteBin(
        capacity_grams=machine_config.get("waste_bin_capacity_grams", WasteBin.DEFAULT_CAPACITY_GRAMS)
    )
    return press_unit, filter_unit, juice_tank, waste_bin

__all__ = [
    'ProcessingUnit',
    'PressUnit',
    'FilterUnit',
    'JuiceTank',
    'WasteBin',
    'build_units',
    'clamp_level'
]
