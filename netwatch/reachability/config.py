"""Configuration for the Reachability Service."""

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from netwatch.shared.config import get_config_path, load_yaml_config
from netwatch.shared.mqtt import MQTTConfig

PROBE_BACKENDS = ("linux", "dummy")


@dataclass
class ReachabilityConfig:
    """Configuration for reachability watching."""

    # Probe settings
    probe: str = "linux"
    poll_interval: float = 2.0  # seconds
    proc_route_path: str = "/proc/net/route"
    proc_ipv6_route_path: str = "/proc/net/ipv6_route"
    sys_class_net: str = "/sys/class/net"

    # Watcher settings
    initial_status_timeout: float = 10.0  # seconds

    # MQTT settings
    publish_mqtt: bool = True
    mqtt: MQTTConfig = field(
        default_factory=lambda: MQTTConfig(client_id="netwatch-reachability")
    )
    mqtt_topic: str = "device/network/reachability"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        if self.probe not in PROBE_BACKENDS:
            raise ValueError(
                f"Unknown probe backend: {self.probe!r} (expected one of {PROBE_BACKENDS})"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "ReachabilityConfig":
        """Create config from dictionary."""
        mqtt_data = dict(data.get("mqtt", {}))
        mqtt_data.setdefault("client_id", "netwatch-reachability")

        return cls(
            probe=data.get("probe", "linux"),
            poll_interval=float(data.get("poll_interval", 2.0)),
            proc_route_path=data.get("proc_route_path", "/proc/net/route"),
            proc_ipv6_route_path=data.get("proc_ipv6_route_path", "/proc/net/ipv6_route"),
            sys_class_net=data.get("sys_class_net", "/sys/class/net"),
            initial_status_timeout=float(data.get("initial_status_timeout", 10.0)),
            publish_mqtt=data.get("publish_mqtt", True),
            mqtt=MQTTConfig.from_dict(mqtt_data),
            mqtt_topic=data.get("mqtt_topic", "device/network/reachability"),
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
        )


def load_config(config_path: Optional[str] = None) -> ReachabilityConfig:
    """Load configuration from YAML file or environment.

    Args:
        config_path: Path to YAML config file. If not provided,
                    looks for REACHABILITY_CONFIG env var, then for
                    config/config-{NETWATCH_ENV}.yaml, then falls back
                    to defaults. Environment overrides apply on top of
                    the last two.

    Returns:
        ReachabilityConfig instance.

    Raises:
        FileNotFoundError: If an explicit config_path doesn't exist.
        ValueError: If the configured probe backend is unknown.
    """
    load_dotenv(find_dotenv(usecwd=True))

    if config_path is not None:
        return ReachabilityConfig.from_dict(load_yaml_config(config_path, load_env=False))

    env_path = os.environ.get("REACHABILITY_CONFIG")
    if env_path and os.path.exists(env_path):
        return ReachabilityConfig.from_dict(load_yaml_config(env_path, load_env=False))

    default_path = get_config_path()
    if default_path.exists():
        config = ReachabilityConfig.from_dict(load_yaml_config(default_path, load_env=False))
    else:
        config = ReachabilityConfig()

    # Environment variable overrides
    if probe := os.environ.get("REACHABILITY_PROBE"):
        config = dataclasses.replace(config, probe=probe)
    if poll_interval := os.environ.get("REACHABILITY_POLL_INTERVAL"):
        config.poll_interval = float(poll_interval)
    if timeout := os.environ.get("REACHABILITY_INITIAL_TIMEOUT"):
        config.initial_status_timeout = float(timeout)
    if mqtt_broker := os.environ.get("MQTT_BROKER"):
        config.mqtt.broker = mqtt_broker
    if log_level := os.environ.get("LOG_LEVEL"):
        config.log_level = log_level
    if log_file := os.environ.get("REACHABILITY_LOG_FILE"):
        config.log_file = log_file

    return config
