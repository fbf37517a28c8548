"""
Commercial citrus juicer simulator
"""

from .errors import JuicerError, StateError, MaintenanceError, ValidationError, CapacityOverflowError
from .models import (
    FruitSize, RipenessLevel, FruitType, JuiceVolume, Fruit,
    MachineState, PressState, FilterState, PressResult, MachineMetrics
)
from .state_machine import JuicerMachine

__version__ = "0.1.0"

__all__ = [
    'JuicerError',
    'StateError',
    'MaintenanceError',
    'ValidationError',
    'CapacityOverflowError',
    'FruitSize',
    'RipenessLevel',
    'FruitType',
    'JuiceVolume',
    'Fruit',
    'MachineState',
    'PressState',
    'FilterState',
    'PressResult',
    'MachineMetrics',
    'JuicerMachine'
]
