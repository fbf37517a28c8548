#!/usr/bin/env python3
"""
Test the press unit: wear, efficiency floor, maintenance and fault handling
"""

import os
import sys

import pytest

# Add the current directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

from JuicerSim.errors import StateError, MaintenanceError
from JuicerSim.models import Fruit, PressState
from JuicerSim.Units import PressUnit


class ExplodingFruit:
    """Fruit stand-in whose yield computation fails mid-press"""
    type = "orange"

    def potential_juice_volume(self):
        raise RuntimeError("pulp jam")

    def potential_waste(self):
        return 10.0


def orange(weight=150):
    return Fruit("medium", "ripe", "orange", weight_grams=weight)


def test_single_press():
    press = PressUnit()
    result = press.press(orange())

    assert press.press_count == 1
    assert press.wear_percentage == 0.1
    assert press.is_idle()
    assert press.last_press_time is not None
    # 28.846 * (1 - 0.1/100)
    assert result.juice.milliliters == pytest.approx(28.82, abs=0.01)
    assert result.waste == pytest.approx(55.5)


def test_thousand_presses_hit_efficiency_floor():
    press = PressUnit()
    fruit = orange()
    for _ in range(1000):
        press.press(fruit)

    assert press.press_count == 1000
    assert press.wear_percentage == 100.0
    assert press.efficiency_percentage == 50.0
    assert press.needs_maintenance()
    assert press.maintenance_required()

    with pytest.raises(MaintenanceError):
        press.press(fruit)
    assert press.press_count == 1000


def test_maintenance_error_is_a_state_error():
    press = PressUnit(max_presses=2)
    press.press(orange())
    press.press(orange())
    with pytest.raises(StateError, match="needs maintenance"):
        press.press(orange())


def test_failed_press_returns_to_idle_without_counting():
    press = PressUnit()
    with pytest.raises(RuntimeError):
        press.press(ExplodingFruit())

    assert press.state == PressState.IDLE
    assert press.press_count == 0
    assert press.wear_percentage == 0.0


def test_error_state_blocks_until_reset():
    press = PressUnit()
    press.trigger_error("bearing seized")

    assert press.is_error()
    assert press.get_status()["fault_reason"] == "bearing seized"
    with pytest.raises(StateError, match="not idle"):
        press.press(orange())

    press.reset()
    assert press.is_idle()
    press.press(orange())
    assert press.press_count == 1


def test_perform_maintenance_restores_factory_condition():
    press = PressUnit(max_presses=3)
    for _ in range(3):
        press.press(orange())
    press.trigger_error("worn out")

    press.perform_maintenance()

    status = press.get_status()
    assert status["state"] == "idle"
    assert status["press_count"] == 0
    assert status["wear_percentage"] == 0.0
    assert status["efficiency_percentage"] == 100.0
    assert status["needs_maintenance"] is False


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
