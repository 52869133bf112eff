"""MQTT configuration and payload helpers."""

import json
import time
from dataclasses import dataclass
from typing import Optional


@dataclass
class MQTTConfig:
    """MQTT broker configuration."""
    broker: str = "localhost"
    port: int = 1883
    client_id: str = "netwatch-client"
    keepalive: int = 60
    qos: int = 1

    @classmethod
    def from_dict(cls, data: dict) -> "MQTTConfig":
        """Create config from dictionary."""
        return cls(
            broker=data.get("broker", "localhost"),
            port=data.get("port", 1883),
            client_id=data.get("client_id", "netwatch-client"),
            keepalive=data.get("keepalive", 60),
            qos=data.get("qos", 1),
        )


def create_status_payload(
    available: bool,
    sensor_id: str,
    timestamp: Optional[float] = None,
) -> str:
    """Create the MQTT payload for a reachability status.

    The numeric ``value`` mirrors ``available`` so the payload can be logged
    alongside ordinary sensor readings.

    Args:
        available: Whether the network is reachable.
        sensor_id: Identifier of the publishing client.
        timestamp: Unix timestamp (defaults to current time).

    Returns:
        JSON string payload.
    """
    return json.dumps({
        "available": available,
        "value": 1 if available else 0,
        "ts": timestamp or time.time(),
        "sensor": sensor_id,
    })
