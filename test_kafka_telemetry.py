#!/usr/bin/env python3
"""
Test Kafka telemetry message building and publishing
"""

import asyncio
import os
import sys
from datetime import datetime

from aiokafka.errors import KafkaError

# Add the current directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

from JuicerSim.kafka_integration import TelemetryPublisher, get_timestamps
from JuicerSim.main import DEFAULT_CONFIG
from JuicerSim.models import Fruit
from JuicerSim.monitoring import JuicerMonitor
from JuicerSim.state_machine import JuicerMachine


class RecordingProducer:
    """Producer stand-in that keeps what it was asked to send"""

    def __init__(self, error=None):
        self.sent = []
        self.error = error

    async def send_and_wait(self, topic, key=None, value=None):
        if self.error:
            raise self.error
        self.sent.append((topic, key, value))

    async def stop(self):
        pass


def make_status():
    machine = JuicerMachine(machine_id="juicer-7")
    machine.start()
    machine.feed_fruit(Fruit("medium", "ripe", "orange", weight_grams=150))
    return machine.status()


def test_get_timestamps():
    local_time, utc_time = get_timestamps("Europe/Rome")

    assert utc_time.endswith("+00:00")
    local = datetime.fromisoformat(local_time)
    utc = datetime.fromisoformat(utc_time)
    assert local.utcoffset() is not None
    assert abs((local - utc).total_seconds()) < 1


def test_publisher_reads_config():
    publisher = TelemetryPublisher(DEFAULT_CONFIG, JuicerMonitor())

    assert publisher.enabled is False
    assert publisher.kafka_broker == "localhost:9092"
    assert publisher.status_topic == "juicer.telemetry.status"
    assert publisher.timezone_name == "Europe/Rome"


def test_build_status_message():
    publisher = TelemetryPublisher(DEFAULT_CONFIG, JuicerMonitor())
    message = publisher.build_status_message(make_status())

    assert message["machine_id"] == "juicer-7"
    assert message["state"] == "running"
    assert message["fruits_processed"] == 1
    assert message["press_count"] == 1
    assert message["filter_needs_cleaning"] is False
    assert message["total_waste_grams"] == 55.5
    assert "local_timestamp" in message and "utc_timestamp" in message


def test_disabled_publisher_never_connects():
    publisher = TelemetryPublisher(DEFAULT_CONFIG, JuicerMonitor())

    async def scenario():
        await publisher.start()
        sent = await publisher.publish_status(make_status())
        await publisher.stop()
        return sent

    assert asyncio.run(scenario()) is False
    assert publisher.kafka_producer is None


def test_publish_status_sends_to_status_topic():
    monitor = JuicerMonitor()
    publisher = TelemetryPublisher(DEFAULT_CONFIG, monitor)
    producer = RecordingProducer()
    publisher.kafka_producer = producer

    assert asyncio.run(publisher.publish_status(make_status())) is True

    topic, key, value = producer.sent[0]
    assert topic == "juicer.telemetry.status"
    assert key == "juicer-7"
    assert value["machine_id"] == "juicer-7"
    assert monitor.message_counts["juicer.telemetry.status"] == 1


def test_publish_status_kafka_failure_is_recorded():
    monitor = JuicerMonitor()
    publisher = TelemetryPublisher(DEFAULT_CONFIG, monitor)
    publisher.kafka_producer = RecordingProducer(error=KafkaError())

    assert asyncio.run(publisher.publish_status(make_status())) is False
    assert monitor.error_counts["telemetry_error"] == 1
    assert not monitor.message_counts


if __name__ == "__main__":
    import pytest
    sys.exit(pytest.main([__file__, "-v"]))
