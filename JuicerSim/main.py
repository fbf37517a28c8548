"""
Commercial Citrus Juicer - configuration and service layer
Translates front-end requests into juicer machine operations
"""

import copy
import logging
import os
import threading
from typing import Dict, Any, Optional

import yaml

from .errors import classify_error
from .models import Fruit, FruitType, FruitSize, RipenessLevel
from .monitoring import monitor as default_monitor, JuicerMonitor
from .state_machine import JuicerMachine

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

DEFAULT_CONFIG: Dict[str, Any] = {
    "machine": {
        "id": None,
        "juice_tank_capacity_ml": 5000,
        "waste_bin_capacity_grams": 2000
    },
    "press": {
        "max_presses": 1000,
        "wear_per_press": 0.1
    },
    "filter": {
        "max_filters": 500,
        "wear_per_filter": 0.2,
        "clog_per_filter": 5,
        "clog_threshold": 80
    },
    "web": {
        "host": "0.0.0.0",
        "port": 4567
    },
    "site": {
        "timezone": "Europe/Rome"
    },
    "kafka": {
        "enabled": False,
        "bootstrap_servers": "localhost:9092",
        "topic_prefix": "juicer.telemetry"
    },
    "logging": {
        "level": "INFO"
    }
}


def setup_logging(level: str = "INFO"):
    """Configure root logging once for the whole process"""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT
    )


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into base in place (override wins)"""
    for key, value in override.items():
        if isinstance(value, dict) and key in base and isinstance(base[key], dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from defaults, config.yaml and environment"""
    config = copy.deepcopy(DEFAULT_CONFIG)

    # Try to load from config.yaml if exists
    config_path = config_path or os.getenv("CONFIG_PATH", "config.yaml")
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                file_config = yaml.safe_load(f)
            if isinstance(file_config, dict):
                deep_merge(config, file_config)
            elif file_config is not None:
                logger.warning(f"Ignoring {config_path}: top level is not a mapping")
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load {config_path}: {e}, using defaults")

    # Environment overrides
    if os.getenv("JUICER_WEB_PORT"):
        config["web"]["port"] = int(os.getenv("JUICER_WEB_PORT"))
    if os.getenv("JUICER_LOG_LEVEL"):
        config["logging"]["level"] = os.getenv("JUICER_LOG_LEVEL")
    if os.getenv("ENABLE_KAFKA"):
        config["kafka"]["enabled"] = os.getenv("ENABLE_KAFKA", "false").lower() == "true"
    if os.getenv("KAFKA_BOOTSTRAP_SERVERS"):
        config["kafka"]["bootstrap_servers"] = os.getenv("KAFKA_BOOTSTRAP_SERVERS")

    return config


class JuicerSimulator:
    """Service layer shared by the console and web front ends

    Every operation returns a result dict with a ``success`` flag; calls on
    the machine are serialized so a concurrent reader never observes a
    half-finished feed cycle.
    """

    EXPECTED_YIELD_ML = 50.0

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 machine: Optional[JuicerMachine] = None,
                 monitor: Optional[JuicerMonitor] = None):
        self.config = config or copy.deepcopy(DEFAULT_CONFIG)
        self.machine = machine or JuicerMachine.from_config(self.config)
        self.monitor = monitor or default_monitor
        self._lock = threading.Lock()
        self.monitor.update_machine_gauges(self.machine.status())

    def _failure(self, action: str, error: Exception, **data) -> Dict[str, Any]:
        error_type = classify_error(error)
        self.monitor.record_error(error_type)
        logger.warning(f"{action} failed ({error_type}): {error}")
        return {
            "success": False,
            "message": f"Failed to {action}: {error}",
            "error_type": error_type,
            "state": self.machine.state.value,
            **data
        }

    def _refresh_gauges(self):
        self.monitor.update_machine_gauges(self.machine.status())

    def start_juicing(self) -> Dict[str, Any]:
        with self._lock:
            try:
                self.machine.start()
            except Exception as e:
                return self._failure("start juicer", e)
            finally:
                self._refresh_gauges()
            return {"success": True, "message": "Juicer started successfully",
                    "state": self.machine.state.value}

    def stop_juicing(self) -> Dict[str, Any]:
        with self._lock:
            try:
                self.machine.stop()
            except Exception as e:
                return self._failure("stop juicer", e)
            finally:
                self._refresh_gauges()
            return {"success": True, "message": "Juicer stopped successfully",
                    "state": self.machine.state.value}

    def clean_machine(self) -> Dict[str, Any]:
        with self._lock:
            self.machine.clean()
            self.monitor.record_cleaning_cycle()
            self._refresh_gauges()
            return {
                "success": True,
                "message": "Machine cleaned successfully",
                "state": self.machine.state.value,
                "cleaning_cycles": self.machine.metrics.cleaning_cycles
            }

    def feed_fruit(self, fruit_type: str = "orange", size: str = "medium",
                   ripeness: str = "ripe", weight: Optional[float] = None) -> Dict[str, Any]:
        """Build a fruit from tags and run it through the machine"""
        with self._lock:
            try:
                fruit = Fruit(
                    size=size,
                    ripeness=ripeness,
                    fruit_type=fruit_type,
                    weight_grams=weight
                )
                result = self.machine.feed_fruit(fruit)
            except Exception as e:
                return self._failure("process fruit", e, juice="0 ml", waste="0g",
                                     metrics=self.machine.metrics.to_dict())
            finally:
                self._refresh_gauges()

            self.monitor.record_fruit_processed(fruit.type, result.juice.milliliters, result.waste)
            return {
                "success": True,
                "message": "Fruit processed successfully",
                **result.to_dict(),
                "fruit": {
                    "id": fruit.id,
                    "type": fruit.type,
                    "size": fruit.size.tag,
                    "ripeness": fruit.ripeness.tag,
                    "weight_grams": fruit.weight_grams
                },
                "metrics": self.machine.metrics.to_dict()
            }

    def reset_machine(self) -> Dict[str, Any]:
        with self._lock:
            self.machine.reset_to_idle()
            self._refresh_gauges()
            return {"success": True, "message": "Machine reset to idle",
                    "state": self.machine.state.value}

    def perform_maintenance(self) -> Dict[str, Any]:
        with self._lock:
            try:
                self.machine.perform_maintenance()
            except Exception as e:
                return self._failure("perform maintenance", e)
            finally:
                self._refresh_gauges()
            return {"success": True, "message": "Maintenance completed",
                    "state": self.machine.state.value}

    def report_fault(self, reason: str = "Press fault") -> Dict[str, Any]:
        with self._lock:
            self.machine.report_fault(reason)
            self.monitor.record_error("press_fault")
            self._refresh_gauges()
            return {"success": True, "message": f"Fault recorded: {reason}",
                    "state": self.machine.state.value}

    def get_status(self) -> Dict[str, Any]:
        with self._lock:
            return {"success": True, "status": self.machine.status()}

    def get_metrics(self) -> Dict[str, Any]:
        with self._lock:
            status = self.machine.status()
        return {
            "success": True,
            "state": status["state"],
            "juice_tank": status["juice_tank"],
            "waste_bin": status["waste_bin"],
            "press_unit": status["press_unit"],
            "filter_unit": status["filter_unit"],
            "metrics": status["metrics"],
            "efficiency": self.calculate_efficiency(status["metrics"])
        }

    @classmethod
    def calculate_efficiency(cls, metrics: Dict[str, Any]) -> float:
        """Average juice per fruit as a percentage of the expected yield"""
        if metrics["fruits_processed"] == 0:
            return 0.0
        juice_per_fruit = metrics["total_juice_ml"] / metrics["fruits_processed"]
        return round(juice_per_fruit / cls.EXPECTED_YIELD_ML * 100, 2)

    @staticmethod
    def catalog() -> Dict[str, Any]:
        """Valid fruit tags accepted by feed_fruit"""
        return {
            "fruit_types": FruitType.valid_types(),
            "sizes": FruitSize.valid_sizes(),
            "ripeness": RipenessLevel.valid_levels()
        }
