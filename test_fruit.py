#!/usr/bin/env python3
"""
Test fruit construction and the juice/waste yield formulas
"""

import os
import sys

import pytest

# Add the current directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

from JuicerSim.errors import ValidationError
from JuicerSim.models import Fruit, FruitSize, RipenessLevel, FruitType, MIN_WEIGHT_GRAMS


def test_orange_yield():
    """150g ripe medium orange: 150*0.5*0.8*0.5/1.04 ml juice, 45 + 10.5 g waste"""
    fruit = Fruit(size="medium", ripeness="ripe", fruit_type="orange", weight_grams=150)

    assert fruit.potential_juice_volume().milliliters == pytest.approx(28.85, abs=0.01)
    assert fruit.potential_waste() == pytest.approx(55.5)


def test_lemon_and_grapefruit_yield():
    lemon = Fruit(FruitSize.SMALL, RipenessLevel.UNRIPE, FruitType.LEMON, weight_grams=100)
    # 100*0.4*0.5*0.4 / 1.03
    assert lemon.potential_juice_volume().milliliters == pytest.approx(7.77, abs=0.01)
    # 35 + 65*0.1
    assert lemon.potential_waste() == pytest.approx(41.5)

    grapefruit = Fruit("large", "overripe", "grapefruit", weight_grams=200)
    # 200*0.6*0.7*0.45 / 1.05
    assert grapefruit.potential_juice_volume().milliliters == pytest.approx(36.0, abs=0.01)
    # 80 + 120*0.1
    assert grapefruit.potential_waste() == pytest.approx(92.0)


@pytest.mark.parametrize("size", ["small", "medium", "large"])
def test_random_weight_within_size_range(size):
    for _ in range(20):
        fruit = Fruit(size=size, ripeness="ripe")
        low, high = fruit.size.weight_range
        assert low <= fruit.weight_grams <= high


def test_waste_never_exceeds_weight():
    for fruit_type in FruitType:
        for size in FruitSize:
            fruit = Fruit(size, RipenessLevel.RIPE, fruit_type)
            assert 0 < fruit.potential_waste() <= fruit.weight_grams


def test_defaults_and_identity():
    first = Fruit("medium", "ripe", weight_grams=150)
    second = Fruit("medium", "ripe", weight_grams=150)

    assert first.fruit_type is FruitType.ORANGE
    assert first.type == "orange"
    assert first.id != second.id


def test_fruit_is_immutable():
    fruit = Fruit("medium", "ripe", weight_grams=150)
    with pytest.raises(AttributeError):
        fruit.weight_grams = 200


@pytest.mark.parametrize("kwargs", [
    {"size": "jumbo", "ripeness": "ripe"},
    {"size": "small", "ripeness": "green"},
    {"size": "small", "ripeness": "ripe", "fruit_type": "apple"},
    {"size": "small", "ripeness": "ripe", "weight_grams": 0},
    {"size": "small", "ripeness": "ripe", "weight_grams": -10},
    {"size": "small", "ripeness": "ripe", "weight_grams": "heavy"},
])
def test_invalid_fruit_rejected(kwargs):
    with pytest.raises(ValidationError):
        Fruit(**kwargs)


@pytest.mark.parametrize("weight", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_weight_rejected(weight):
    with pytest.raises(ValidationError, match="finite"):
        Fruit("medium", "ripe", "orange", weight_grams=weight)


@pytest.mark.parametrize("weight", [0.01, 0.5, 0.999])
def test_weight_below_one_gram_rejected(weight):
    with pytest.raises(ValidationError, match="at least"):
        Fruit("small", "ripe", "orange", weight_grams=weight)


def test_lightest_accepted_fruit_still_produces_waste():
    for fruit_type in FruitType:
        fruit = Fruit("small", "unripe", fruit_type, weight_grams=MIN_WEIGHT_GRAMS)
        assert fruit.potential_waste() > 0


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
