#!/usr/bin/env python3
"""
Test the juicer web interface routes against an in-process aiohttp server
"""

import asyncio
import os
import sys

from aiohttp import test_utils

# Add the current directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

from JuicerSim.main import JuicerSimulator
from JuicerSim.monitoring import JuicerMonitor
from JuicerSim.web_interface import WebInterface


def run_with_client(scenario):
    """Run scenario(client, interface) against a fresh simulator"""
    interface = WebInterface(JuicerSimulator(monitor=JuicerMonitor()))

    async def runner():
        async with test_utils.TestClient(test_utils.TestServer(interface.app)) as client:
            return await scenario(client, interface)

    return asyncio.run(runner())


def test_health_and_status():
    async def scenario(client, interface):
        resp = await client.get("/health")
        assert resp.status == 200
        health = await resp.json()
        assert health["status"] == "healthy"
        assert health["machine_id"] == interface.simulator.machine.id

        resp = await client.get("/status")
        status = await resp.json()
        assert status["state"] == "idle"
        assert status["juice_tank"]["capacity_ml"] == 5000

    run_with_client(scenario)


def test_start_feed_stop_clean():
    async def scenario(client, interface):
        resp = await client.post("/start")
        assert resp.status == 200
        assert (await resp.json())["state"] == "running"

        resp = await client.post("/feed", json={"type": "orange", "size": "medium",
                                                "ripeness": "ripe", "weight": 150})
        assert resp.status == 200
        body = await resp.json()
        assert body["success"] is True
        assert body["waste"] == "55.5g"
        assert body["metrics"]["fruits_processed"] == 1

        resp = await client.post("/stop")
        assert (await resp.json())["state"] == "stopped"

        resp = await client.post("/clean")
        body = await resp.json()
        assert body["state"] == "idle"
        assert body["cleaning_cycles"] == 1

    run_with_client(scenario)


def test_feed_defaults_to_medium_ripe_orange():
    async def scenario(client, interface):
        await client.post("/start")
        resp = await client.post("/feed")
        body = await resp.json()
        assert resp.status == 200
        assert body["fruit"]["type"] == "orange"
        assert body["fruit"]["size"] == "medium"
        assert body["fruit"]["ripeness"] == "ripe"

    run_with_client(scenario)


def test_error_status_codes():
    async def scenario(client, interface):
        resp = await client.post("/feed", json={"type": "orange"})
        assert resp.status == 409
        assert (await resp.json())["error_type"] == "state_error"

        await client.post("/start")
        resp = await client.post("/feed", json={"type": "kiwi"})
        assert resp.status == 400
        assert (await resp.json())["error_type"] == "validation_error"

        resp = await client.post("/feed", data="{not json",
                                 headers={"Content-Type": "application/json"})
        assert resp.status == 400
        body = await resp.json()
        assert body["error_type"] == "json_parse_error"
        assert body["message"] == "Invalid JSON"

        resp = await client.post("/start")
        assert resp.status == 409

    run_with_client(scenario)


def test_fault_reset_and_maintenance():
    async def scenario(client, interface):
        await client.post("/start")
        resp = await client.post("/fault", json={"reason": "belt snapped"})
        assert (await resp.json())["state"] == "error"
        assert interface.simulator.machine.fault_reason == "belt snapped"

        resp = await client.post("/reset")
        assert (await resp.json())["state"] == "idle"

        resp = await client.post("/maintenance")
        assert resp.status == 200

    run_with_client(scenario)


def test_metrics_endpoints():
    async def scenario(client, interface):
        await client.post("/start")
        await client.post("/feed", json={"weight": 150})

        resp = await client.get("/api/metrics")
        body = await resp.json()
        assert body["metrics"]["fruits_processed"] == 1
        assert body["efficiency"] > 0

        resp = await client.get("/api/catalog")
        assert (await resp.json())["sizes"] == ["small", "medium", "large"]

        resp = await client.get("/metrics")
        assert resp.status == 200
        assert resp.content_type == "text/plain"
        text = await resp.text()
        assert 'juicer_fruits_processed_total{fruit_type="orange"} 1' in text
        assert 'juicer_machine_state{state="running"} 1' in text
        assert "juicer_request_duration_seconds_count" in text

    run_with_client(scenario)


def test_nan_weight_rejected():
    async def scenario(client, interface):
        await client.post("/start")
        resp = await client.post("/feed", data='{"type": "orange", "weight": NaN}',
                                 headers={"Content-Type": "application/json"})
        assert resp.status == 400
        body = await resp.json()
        assert body["error_type"] == "validation_error"

        metrics = interface.simulator.machine.metrics
        assert metrics.fruits_processed == 0
        assert metrics.total_juice_ml == 0.0
        assert interface.simulator.machine.press_unit.press_count == 0

    run_with_client(scenario)


if __name__ == "__main__":
    import pytest
    sys.exit(pytest.main([__file__, "-v"]))
