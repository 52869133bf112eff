"""Reachability Service - watches the network path and publishes its status."""

import asyncio
import logging
import signal
import time
from typing import Optional

import paho.mqtt.client as mqtt
from paho.mqtt.enums import CallbackAPIVersion

from netwatch.shared.mqtt import create_status_payload

from .config import ReachabilityConfig
from .probes import DummyProbe, LinuxPathProbe, PathStatus, ReachabilityProbe
from .status_manager import NetworkStatusManager
from .watcher import ReachabilityWatcher

logger = logging.getLogger(__name__)


def create_probe(config: ReachabilityConfig) -> ReachabilityProbe:
    """Build the probe backend named in the config."""
    if config.probe == "dummy":
        return DummyProbe(initial_status=PathStatus.SATISFIED)
    return LinuxPathProbe(
        poll_interval=config.poll_interval,
        proc_route_path=config.proc_route_path,
        proc_ipv6_route_path=config.proc_ipv6_route_path,
        sys_class_net=config.sys_class_net,
    )


class ReachabilityService:
    """Service that owns the process-wide watcher and republishes its status."""

    def __init__(
        self,
        config: ReachabilityConfig,
        probe: Optional[ReachabilityProbe] = None,
    ):
        self.config = config
        self.probe = probe or create_probe(config)
        self.watcher = ReachabilityWatcher(self.probe)
        self.status_manager = NetworkStatusManager(
            self.watcher,
            initial_status_timeout=config.initial_status_timeout,
        )
        self.mqtt_client: Optional[mqtt.Client] = None
        self._running = False

    def _setup_mqtt(self) -> None:
        """Set up MQTT client for publishing status."""
        self.mqtt_client = mqtt.Client(
            callback_api_version=CallbackAPIVersion.VERSION2,
            client_id=self.config.mqtt.client_id,
        )

        def on_connect(client, userdata, flags, reason_code, properties):
            if reason_code == 0:
                logger.info("Connected to MQTT broker")
            else:
                logger.error(f"MQTT connection failed: {reason_code}")

        def on_disconnect(client, userdata, flags, reason_code, properties):
            logger.warning(f"Disconnected from MQTT broker: {reason_code}")

        self.mqtt_client.on_connect = on_connect
        self.mqtt_client.on_disconnect = on_disconnect

        try:
            self.mqtt_client.connect(
                self.config.mqtt.broker,
                self.config.mqtt.port,
                self.config.mqtt.keepalive,
            )
            self.mqtt_client.loop_start()
        except Exception as e:
            logger.error(f"Failed to connect to MQTT broker: {e}")
            self.mqtt_client = None

    def publish_status(self, available: bool) -> None:
        """Publish network status to MQTT, retained for late subscribers."""
        if not self.mqtt_client:
            return

        try:
            payload = create_status_payload(
                available,
                sensor_id=self.config.mqtt.client_id,
                timestamp=time.time(),
            )
            result = self.mqtt_client.publish(
                self.config.mqtt_topic,
                payload,
                qos=self.config.mqtt.qos,
                retain=True,
            )
            if result.rc == mqtt.MQTT_ERR_SUCCESS:
                logger.debug(f"Published to {self.config.mqtt_topic}: {payload}")
            else:
                logger.warning(f"Failed to publish to {self.config.mqtt_topic}: rc={result.rc}")
        except Exception as e:
            logger.error(f"Failed to publish status: {e}")

    def _setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        def signal_handler(signum, frame):
            signame = signal.Signals(signum).name
            logger.info(f"Received {signame}, shutting down...")
            self._running = False

        signal.signal(signal.SIGTERM, signal_handler)
        signal.signal(signal.SIGINT, signal_handler)

    async def run_loop(self) -> None:
        """Start watching and keep running until stopped."""
        logger.info(
            f"Starting reachability service (probe={self.config.probe}, "
            f"topic={self.config.mqtt_topic})"
        )

        await self.watcher.start()
        self.status_manager.add_listener(self.publish_status)

        try:
            await self.status_manager.start()
            while self._running:
                await asyncio.sleep(1.0)
        finally:
            await self.status_manager.stop()
            await self.watcher.stop()

    def run(self) -> None:
        """Start the reachability service."""
        self._setup_signal_handlers()
        self._running = True
        if self.config.publish_mqtt:
            self._setup_mqtt()

        try:
            asyncio.run(self.run_loop())
        except KeyboardInterrupt:
            logger.info("Shutting down reachability service...")
        finally:
            self._running = False
            if self.mqtt_client:
                self.mqtt_client.loop_stop()
                self.mqtt_client.disconnect()
