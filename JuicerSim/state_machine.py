import logging
import uuid
from dataclasses import replace
from typing import Dict, Any, Optional

from .errors import StateError
from .models import Fruit, MachineMetrics, MachineState, PressResult
from .Units import PressUnit, FilterUnit, JuiceTank, WasteBin, build_units

logger = logging.getLogger(__name__)


class JuicerMachine:
    """Top-level juicer state machine

    Owns the press, filter, tank and bin. A feed cycle either commits juice,
    waste and production counters together or commits none of them; every
    failed cycle bumps the errors counter and re-raises.
    """

    def __init__(self, machine_id: Optional[str] = None,
                 press_unit: Optional[PressUnit] = None,
                 filter_unit: Optional[FilterUnit] = None,
                 juice_tank: Optional[JuiceTank] = None,
                 waste_bin: Optional[WasteBin] = None):
        self.id = machine_id or str(uuid.uuid4())
        self._state = MachineState.IDLE
        self._press_unit = press_unit or PressUnit()
        self._filter_unit = filter_unit or FilterUnit()
        self._juice_tank = juice_tank or JuiceTank()
        self._waste_bin = waste_bin or WasteBin()
        self._metrics = MachineMetrics()
        self.fault_reason: Optional[str] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "JuicerMachine":
        press_unit, filter_unit, juice_tank, waste_bin = build_units(config)
        return cls(
            machine_id=config.get("machine", {}).get("id"),
            press_unit=press_unit,
            filter_unit=filter_unit,
            juice_tank=juice_tank,
            waste_bin=waste_bin,
        )

    # Read-only accessors

    @property
    def state(self) -> MachineState:
        return self._state

    @property
    def metrics(self) -> MachineMetrics:
        return replace(self._metrics)

    @property
    def press_unit(self) -> PressUnit:
        return self._press_unit

    @property
    def filter_unit(self) -> FilterUnit:
        return self._filter_unit

    @property
    def juice_tank(self) -> JuiceTank:
        return self._juice_tank

    @property
    def waste_bin(self) -> WasteBin:
        return self._waste_bin

    def is_idle(self) -> bool:
        return self._state == MachineState.IDLE

    def is_running(self) -> bool:
        return self._state == MachineState.RUNNING

    def is_cleaning(self) -> bool:
        return self._state == MachineState.CLEANING

    def is_error(self) -> bool:
        return self._state == MachineState.ERROR

    def is_stopped(self) -> bool:
        return self._state == MachineState.STOPPED

    def _transition(self, new_state: MachineState):
        logger.info(f"Machine {self.id}: {self._state.value} -> {new_state.value}")
        self._state = new_state

    # Operations

    def start(self):
        if not self.is_idle():
            raise StateError("Machine not idle")
        self._transition(MachineState.RUNNING)

    def stop(self):
        if not self.is_running():
            raise StateError("Machine not running")
        self._transition(MachineState.STOPPED)

    def feed_fruit(self, fruit: Fruit) -> PressResult:
        """Run one fruit through press, filter, tank and bin"""
        if not self.is_running():
            raise StateError("Machine not running")
        if self._press_unit.is_error():
            raise StateError("Press unit error")
        if self._filter_unit.is_clogged():
            raise StateError("Filter clogged")

        try:
            pressed = self._press_unit.press(fruit)
            filtered_juice = self._filter_unit.filter(pressed.juice)

            # Both accumulators are checked before either is touched
            self._juice_tank.check_addition(filtered_juice)
            self._waste_bin.check_addition(pressed.waste)

            self._juice_tank.add_juice(filtered_juice)
            self._waste_bin.add_waste(pressed.waste)
            self._metrics.record_cycle(filtered_juice, pressed.waste)
        except Exception as e:
            self._metrics.errors += 1
            logger.error(f"Machine {self.id}: feed cycle failed: {e}")
            raise

        logger.info(f"Machine {self.id}: processed {fruit.type} -> "
                    f"{filtered_juice}, {pressed.waste}g waste")
        return PressResult(juice=filtered_juice, waste=pressed.waste)

    def clean(self):
        """Empty tank and bin, unclog the filter, reset the press; always ends idle"""
        self._transition(MachineState.CLEANING)
        self._juice_tank.empty()
        self._waste_bin.empty()
        self._filter_unit.clean()
        self._press_unit.reset()
        self.fault_reason = None
        self._metrics.cleaning_cycles += 1
        self._transition(MachineState.IDLE)

    def reset_to_idle(self):
        """Operator recovery after a press fault, without a cleaning cycle"""
        self._press_unit.reset()
        self.fault_reason = None
        self._transition(MachineState.IDLE)

    def report_fault(self, reason: str = "Press fault"):
        """Record a press breakdown; the machine stays in error until reset or cleaned"""
        self._press_unit.trigger_error(reason)
        self.fault_reason = reason
        self._transition(MachineState.ERROR)

    def perform_maintenance(self):
        """Service both units (press overhaul and filter replacement)"""
        if self.is_running():
            raise StateError("Machine must be stopped for maintenance")
        self._press_unit.perform_maintenance()
        self._filter_unit.replace_filter()
        self.fault_reason = None
        self._transition(MachineState.IDLE)

    def status(self) -> Dict[str, Any]:
        """Side-effect free snapshot of the whole machine"""
        return {
            "machine_id": self.id,
            "state": self._state.value,
            "fault_reason": self.fault_reason,
            "juice_tank": self._juice_tank.get_status(),
            "waste_bin": self._waste_bin.get_status(),
            "press_unit": self._press_unit.get_status(),
            "filter_unit": self._filter_unit.get_status(),
            "metrics": self._metrics.to_dict(),
        }
