"""
Web interface for the juicer simulator: JSON control API and metrics endpoint
"""

import asyncio
import json
import logging
import sys
import time
from datetime import datetime
from typing import Optional, Dict, Any

from aiohttp import web

from .kafka_integration import TelemetryPublisher
from .main import JuicerSimulator, load_config, setup_logging

logger = logging.getLogger(__name__)

# HTTP status per error_type reported by the service layer
ERROR_STATUS = {
    "state_error": 409,
    "maintenance_error": 409,
    "overflow_error": 409,
    "validation_error": 400,
    "json_parse_error": 400,
}


class WebInterface:
    """HTTP front end for one juicer machine"""

    def __init__(self, simulator: Optional[JuicerSimulator] = None,
                 publisher: Optional[TelemetryPublisher] = None,
                 host: str = "0.0.0.0", port: int = 4567):
        self.host = host
        self.port = port
        self.simulator = simulator or JuicerSimulator(load_config())
        self.publisher = publisher
        self.app = web.Application(middlewares=[self.timing_middleware])
        self.setup_routes()

    def setup_routes(self):
        """Setup HTTP routes"""
        self.app.router.add_get('/health', self.health_handler)
        self.app.router.add_get('/status', self.status_handler)
        self.app.router.add_get('/metrics', self.prometheus_handler)
        self.app.router.add_get('/api/metrics', self.metrics_handler)
        self.app.router.add_get('/api/catalog', self.catalog_handler)

        # Machine control
        self.app.router.add_post('/start', self.start_handler)
        self.app.router.add_post('/stop', self.stop_handler)
        self.app.router.add_post('/clean', self.clean_handler)
        self.app.router.add_post('/feed', self.feed_handler)
        self.app.router.add_post('/reset', self.reset_handler)
        self.app.router.add_post('/maintenance', self.maintenance_handler)
        self.app.router.add_post('/fault', self.fault_handler)

    @web.middleware
    async def timing_middleware(self, request, handler):
        start_time = time.perf_counter()
        try:
            return await handler(request)
        finally:
            duration = time.perf_counter() - start_time
            self.simulator.monitor.observe_request_duration(duration)
            logger.debug(f"{request.method} {request.path} took {duration:.4f}s")

    def _respond(self, result: Dict[str, Any]) -> web.Response:
        status = 200 if result["success"] else ERROR_STATUS.get(result.get("error_type"), 500)
        return web.json_response(result, status=status)

    async def _publish(self):
        if self.publisher:
            await self.publisher.publish_status(self.simulator.machine.status())

    async def health_handler(self, request):
        """Health check endpoint"""
        return web.json_response({
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "machine_id": self.simulator.machine.id
        })

    async def status_handler(self, request):
        return web.json_response(self.simulator.get_status()["status"])

    async def metrics_handler(self, request):
        return web.json_response(self.simulator.get_metrics())

    async def catalog_handler(self, request):
        return web.json_response(self.simulator.catalog())

    async def prometheus_handler(self, request):
        """Prometheus-style metrics endpoint"""
        self.simulator.monitor.update_machine_gauges(self.simulator.get_status()["status"])
        return web.Response(text=self.simulator.monitor.export_prometheus(),
                            content_type='text/plain')

    async def start_handler(self, request):
        result = self.simulator.start_juicing()
        await self._publish()
        return self._respond(result)

    async def stop_handler(self, request):
        result = self.simulator.stop_juicing()
        await self._publish()
        return self._respond(result)

    async def clean_handler(self, request):
        result = self.simulator.clean_machine()
        await self._publish()
        return self._respond(result)

    async def reset_handler(self, request):
        result = self.simulator.reset_machine()
        await self._publish()
        return self._respond(result)

    async def maintenance_handler(self, request):
        result = self.simulator.perform_maintenance()
        await self._publish()
        return self._respond(result)

    async def fault_handler(self, request):
        reason = "Press fault"
        if request.can_read_body:
            try:
                data = await request.json()
            except json.JSONDecodeError:
                return self._invalid_json()
            if isinstance(data, dict) and data.get("reason"):
                reason = str(data["reason"])
        result = self.simulator.report_fault(reason)
        await self._publish()
        return self._respond(result)

    def _invalid_json(self) -> web.Response:
        self.simulator.monitor.record_error("json_parse_error")
        return self._respond({
            "success": False,
            "message": "Invalid JSON",
            "error_type": "json_parse_error",
            "juice": "0 ml",
            "waste": "0g",
            "metrics": self.simulator.machine.metrics.to_dict()
        })

    async def feed_handler(self, request):
        """Feed one fruit: {"type": ..., "size": ..., "ripeness": ..., "weight": ...}"""
        try:
            data = await request.json() if request.can_read_body else {}
        except json.JSONDecodeError:
            return self._invalid_json()
        if not isinstance(data, dict):
            return self._invalid_json()

        result = self.simulator.feed_fruit(
            fruit_type=data.get("type") or "orange",
            size=data.get("size") or "medium",
            ripeness=data.get("ripeness") or "ripe",
            weight=data.get("weight")
        )
        await self._publish()
        return self._respond(result)

    async def start_server(self):
        """Start the web server"""
        if self.publisher:
            await self.publisher.start()

        runner = web.AppRunner(self.app)
        await runner.setup()

        site = web.TCPSite(runner, self.host, self.port)
        await site.start()

        logger.info(f"Web interface started at http://{self.host}:{self.port}")
        return runner

    async def stop_server(self, runner):
        """Stop the web server"""
        if self.publisher:
            await self.publisher.stop()
        await runner.cleanup()


async def main(config: Optional[Dict[str, Any]] = None):
    """Main web interface entry point"""
    config = config or load_config()
    setup_logging(config["logging"]["level"])

    simulator = JuicerSimulator(config)
    interface = WebInterface(
        simulator,
        publisher=TelemetryPublisher(config, simulator.monitor),
        host=config["web"]["host"],
        port=config["web"]["port"]
    )

    runner = await interface.start_server()
    try:
        # Keep running until interrupted
        while True:
            await asyncio.sleep(1)
    finally:
        logger.info("Shutting down web interface...")
        await interface.stop_server(runner)

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nShutdown complete.")
    except Exception as e:
        print(f"Fatal error: {e}")
        sys.exit(1)
