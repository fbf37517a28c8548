"""
Telemetry and counter sink for the juicer simulator
"""

import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Any, Optional

REQUEST_DURATION_BUCKETS = (0.01, 0.05, 0.1, 0.25, 0.5, 1.0)
TRACKED_STATES = ("idle", "running", "cleaning", "error", "stopped")


@dataclass
class FruitTypeStats:
    """Production totals for one fruit type"""
    fruits_processed: int = 0
    juice_ml: float = 0.0
    waste_grams: float = 0.0


@dataclass
class DurationHistogram:
    """Cumulative histogram of request durations (seconds)"""
    buckets: tuple = REQUEST_DURATION_BUCKETS
    bucket_counts: List[int] = field(default_factory=lambda: [0] * len(REQUEST_DURATION_BUCKETS))
    total: float = 0.0
    count: int = 0

    def observe(self, seconds: float):
        self.total += seconds
        self.count += 1
        for index, upper_bound in enumerate(self.buckets):
            if seconds <= upper_bound:
                self.bucket_counts[index] += 1


class JuicerMonitor:
    """Collects counters and gauges fed by the front ends"""

    def __init__(self):
        self.start_time = datetime.now()
        self.fruit_stats: Dict[str, FruitTypeStats] = defaultdict(FruitTypeStats)
        self.error_counts: Dict[str, int] = defaultdict(int)
        self.message_counts: Dict[str, int] = defaultdict(int)
        self.cleaning_cycles = 0
        self.machine_state = "idle"
        self.juice_tank_percentage = 0.0
        self.waste_bin_percentage = 0.0
        self.request_durations = DurationHistogram()
        self.last_message_time: Optional[datetime] = None

        # Thread-safe lock for updating stats
        self._lock = threading.Lock()

    def record_fruit_processed(self, fruit_type: str, juice_ml: float, waste_grams: float):
        with self._lock:
            stats = self.fruit_stats[fruit_type]
            stats.fruits_processed += 1
            stats.juice_ml = round(stats.juice_ml + juice_ml, 2)
            stats.waste_grams = round(stats.waste_grams + waste_grams, 2)

    def record_error(self, error_type: str = "unknown"):
        with self._lock:
            self.error_counts[error_type] += 1

    def record_cleaning_cycle(self):
        with self._lock:
            self.cleaning_cycles += 1

    def record_message_sent(self, topic: str):
        with self._lock:
            self.message_counts[topic] += 1
            self.last_message_time = datetime.now()

    def observe_request_duration(self, seconds: float):
        with self._lock:
            self.request_durations.observe(seconds)

    def update_machine_gauges(self, status: Dict[str, Any]):
        """Mirror state and fill levels from a machine status snapshot"""
        with self._lock:
            self.machine_state = status["state"]
            self.juice_tank_percentage = float(status["juice_tank"]["percentage"])
            self.waste_bin_percentage = float(status["waste_bin"]["percentage"])

    def get_current_stats(self) -> Dict[str, Any]:
        with self._lock:
            uptime_seconds = (datetime.now() - self.start_time).total_seconds()
            return {
                "timestamp": datetime.now().isoformat(),
                "uptime_seconds": round(uptime_seconds, 2),
                "uptime_formatted": str(timedelta(seconds=int(uptime_seconds))),
                "machine_state": self.machine_state,
                "juice_tank_percentage": self.juice_tank_percentage,
                "waste_bin_percentage": self.waste_bin_percentage,
                "cleaning_cycles": self.cleaning_cycles,
                "fruit_stats": {
                    fruit_type: {
                        "fruits_processed": stats.fruits_processed,
                        "juice_ml": stats.juice_ml,
                        "waste_grams": stats.waste_grams,
                    }
                    for fruit_type, stats in self.fruit_stats.items()
                },
                "errors": dict(self.error_counts),
                "messages_sent": dict(self.message_counts),
                "requests_observed": self.request_durations.count,
            }

    def export_prometheus(self) -> str:
        """Render all counters and gauges in Prometheus text format"""
        with self._lock:
            lines = [
                "# HELP juicer_fruits_processed_total Total number of fruits processed",
                "# TYPE juicer_fruits_processed_total counter",
            ]
            for fruit_type, stats in sorted(self.fruit_stats.items()):
                lines.append(f'juicer_fruits_processed_total{{fruit_type="{fruit_type}"}} {stats.fruits_processed}')

            lines += [
                "# HELP juicer_juice_produced_ml_total Total juice produced in milliliters",
                "# TYPE juicer_juice_produced_ml_total counter",
            ]
            for fruit_type, stats in sorted(self.fruit_stats.items()):
                lines.append(f'juicer_juice_produced_ml_total{{fruit_type="{fruit_type}"}} {stats.juice_ml}')

            lines += [
                "# HELP juicer_waste_produced_grams_total Total waste produced in grams",
                "# TYPE juicer_waste_produced_grams_total counter",
            ]
            for fruit_type, stats in sorted(self.fruit_stats.items()):
                lines.append(f'juicer_waste_produced_grams_total{{fruit_type="{fruit_type}"}} {stats.waste_grams}')

            lines += [
                "# HELP juicer_errors_total Total number of errors encountered",
                "# TYPE juicer_errors_total counter",
            ]
            for error_type, count in sorted(self.error_counts.items()):
                lines.append(f'juicer_errors_total{{error_type="{error_type}"}} {count}')

            lines += [
                "# HELP juicer_cleaning_cycles_total Total number of cleaning cycles completed",
                "# TYPE juicer_cleaning_cycles_total counter",
                f"juicer_cleaning_cycles_total {self.cleaning_cycles}",
                "# HELP juicer_machine_state Current machine state",
                "# TYPE juicer_machine_state gauge",
            ]
            for state in TRACKED_STATES:
                value = 1 if state == self.machine_state else 0
                lines.append(f'juicer_machine_state{{state="{state}"}} {value}')

            lines += [
                "# HELP juicer_juice_tank_percentage Current juice tank fill percentage",
                "# TYPE juicer_juice_tank_percentage gauge",
                f"juicer_juice_tank_percentage {self.juice_tank_percentage}",
                "# HELP juicer_waste_bin_percentage Current waste bin fill percentage",
                "# TYPE juicer_waste_bin_percentage gauge",
                f"juicer_waste_bin_percentage {self.waste_bin_percentage}",
                "# HELP juicer_request_duration_seconds HTTP request duration in seconds",
                "# TYPE juicer_request_duration_seconds histogram",
            ]
            histogram = self.request_durations
            for upper_bound, count in zip(histogram.buckets, histogram.bucket_counts):
                lines.append(f'juicer_request_duration_seconds_bucket{{le="{upper_bound}"}} {count}')
            lines += [
                f'juicer_request_duration_seconds_bucket{{le="+Inf"}} {histogram.count}',
                f"juicer_request_duration_seconds_sum {round(histogram.total, 6)}",
                f"juicer_request_duration_seconds_count {histogram.count}",
            ]

            return "\n".join(lines) + "\n"

# Global monitor instance
monitor = JuicerMonitor()
