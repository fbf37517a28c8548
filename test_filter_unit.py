#!/usr/bin/env python3
"""
Test the filter unit: clogging, cleaning and replacement
"""

import os
import sys

import pytest

# Add the current directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

from JuicerSim.errors import StateError, MaintenanceError
from JuicerSim.models import JuiceVolume, FilterState
from JuicerSim.Units import FilterUnit


def test_single_filter_pass():
    unit = FilterUnit()
    filtered = unit.filter(JuiceVolume(100))

    # 100 * (1 - 0.2/200)
    assert filtered.milliliters == 99.9
    assert unit.filter_count == 1
    assert unit.clog_level == 5
    assert unit.is_idle()


def test_sixteen_passes_clog_the_filter():
    unit = FilterUnit()
    for _ in range(16):
        unit.filter(JuiceVolume(10))

    assert unit.clog_level >= 80
    assert unit.state == FilterState.CLOGGED
    assert unit.is_clogged()
    assert not unit.is_idle()
    assert unit.get_status()["needs_cleaning"] is True


def test_clogged_is_sticky():
    unit = FilterUnit()
    for _ in range(16):
        unit.filter(JuiceVolume(10))

    for _ in range(3):
        with pytest.raises(StateError, match="clogged"):
            unit.filter(JuiceVolume(10))
    assert unit.filter_count == 16
    assert unit.is_clogged()


def test_clean_keeps_wear():
    unit = FilterUnit()
    for _ in range(16):
        unit.filter(JuiceVolume(10))

    unit.clean()

    assert unit.is_idle()
    assert unit.clog_level == 0
    assert unit.filter_count == 16
    assert unit.wear_percentage == pytest.approx(3.2)
    unit.filter(JuiceVolume(10))


def test_efficiency_floor():
    unit = FilterUnit(clog_per_filter=0)
    unit.wear_level = 100.0
    assert unit.efficiency_percentage == 80.0


def test_replacement_required_after_max_filters():
    unit = FilterUnit(max_filters=3, clog_per_filter=0)
    for _ in range(3):
        unit.filter(JuiceVolume(10))

    assert unit.needs_replacement()
    with pytest.raises(MaintenanceError):
        unit.filter(JuiceVolume(10))

    unit.replace_filter()
    status = unit.get_status()
    assert status["filter_count"] == 0
    assert status["wear_percentage"] == 0.0
    assert status["needs_replacement"] is False
    unit.filter(JuiceVolume(10))


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
