"""
Kafka integration for the juicer simulator
Publishes machine status snapshots to a telemetry topic
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Tuple

import pytz
from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError

from .monitoring import monitor as default_monitor, JuicerMonitor

logger = logging.getLogger(__name__)


def get_timestamps(timezone_name: str) -> Tuple[str, str]:
    """Get local and UTC timestamps"""
    utc_now = datetime.now(timezone.utc)
    local_tz = pytz.timezone(timezone_name)
    local_now = utc_now.astimezone(local_tz)

    return (
        local_now.isoformat(),
        utc_now.isoformat()
    )


class TelemetryPublisher:
    """Status publisher that pushes to Kafka topics"""

    def __init__(self, config: Dict[str, Any], monitor: Optional[JuicerMonitor] = None):
        kafka_config = config.get("kafka", {})
        self.enabled = bool(kafka_config.get("enabled", False))
        self.kafka_broker = kafka_config.get("bootstrap_servers", "localhost:9092")
        self.topic_prefix = kafka_config.get("topic_prefix", "juicer.telemetry")
        self.timezone_name = config.get("site", {}).get("timezone", "UTC")
        self.monitor = monitor or default_monitor
        self.kafka_producer: Optional[AIOKafkaProducer] = None

    @property
    def status_topic(self) -> str:
        return f"{self.topic_prefix}.status"

    async def start(self):
        """Start the Kafka producer when telemetry is enabled"""
        if not self.enabled:
            logger.info("Kafka telemetry disabled")
            return

        try:
            self.kafka_producer = AIOKafkaProducer(
                bootstrap_servers=self.kafka_broker,
                value_serializer=lambda v: json.dumps(v).encode('utf-8'),
                key_serializer=lambda k: str(k).encode('utf-8') if k is not None else None,
                acks='all'
            )
            await self.kafka_producer.start()
            logger.info(f"Kafka producer started successfully. Connected to {self.kafka_broker}")
        except Exception as e:
            logger.error(f"Failed to start Kafka producer: {e}")
            self.kafka_producer = None
            raise

    async def stop(self):
        if self.kafka_producer:
            await self.kafka_producer.stop()
            self.kafka_producer = None
            logger.info("Kafka producer stopped")

    def build_status_message(self, status: Dict[str, Any]) -> Dict[str, Any]:
        """Flatten a machine status snapshot into a telemetry record"""
        local_time, utc_time = get_timestamps(self.timezone_name)
        metrics = status["metrics"]

        return {
            "machine_id": status["machine_id"],
            "state": status["state"],
            "local_timestamp": local_time,
            "utc_timestamp": utc_time,
            "juice_tank_percentage": status["juice_tank"]["percentage"],
            "waste_bin_percentage": status["waste_bin"]["percentage"],
            "press_state": status["press_unit"]["state"],
            "press_count": status["press_unit"]["press_count"],
            "press_wear_percentage": status["press_unit"]["wear_percentage"],
            "filter_state": status["filter_unit"]["state"],
            "filter_count": status["filter_unit"]["filter_count"],
            "filter_needs_cleaning": status["filter_unit"]["needs_cleaning"],
            "fruits_processed": metrics["fruits_processed"],
            "total_juice_ml": metrics["total_juice_ml"],
            "total_waste_grams": metrics["total_waste_grams"],
            "errors": metrics["errors"],
            "cleaning_cycles": metrics["cleaning_cycles"]
        }

    async def publish_status(self, status: Dict[str, Any]) -> bool:
        """Send a status snapshot to the status topic"""
        if not self.kafka_producer:
            logger.debug("Kafka producer not started, skipping telemetry")
            return False

        message = self.build_status_message(status)
        key = message["machine_id"]

        try:
            await self.kafka_producer.send_and_wait(
                topic=self.status_topic,
                key=key,
                value=message
            )
        except KafkaError as e:
            logger.error(f"Kafka telemetry error: {e}")
            self.monitor.record_error("telemetry_error")
            return False

        logger.info(f"Sent telemetry data to topic '{self.status_topic}': {key}")
        self.monitor.record_message_sent(self.status_topic)
        return True
