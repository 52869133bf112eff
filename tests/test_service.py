import json
import logging
from unittest.mock import MagicMock, patch

import paho.mqtt.client as mqtt
import pytest

from netwatch.reachability.config import ReachabilityConfig
from netwatch.reachability.probes import DummyProbe, LinuxPathProbe, PathStatus
from netwatch.reachability.service import ReachabilityService, create_probe


@pytest.fixture
def config():
    return ReachabilityConfig(probe="dummy", initial_status_timeout=0.05)


@pytest.fixture
def mqtt_client():
    client = MagicMock()
    client.publish.return_value.rc = mqtt.MQTT_ERR_SUCCESS
    return client


def test_create_probe_by_backend(tmp_path):
    assert isinstance(create_probe(ReachabilityConfig(probe="dummy")), DummyProbe)

    probe = create_probe(ReachabilityConfig(
        probe="linux",
        poll_interval=5.0,
        proc_route_path=str(tmp_path / "route"),
    ))
    assert isinstance(probe, LinuxPathProbe)
    assert probe.poll_interval == 5.0


def test_publish_status_payload(config, mqtt_client):
    service = ReachabilityService(config)
    service.mqtt_client = mqtt_client

    service.publish_status(False)

    topic, payload = mqtt_client.publish.call_args.args
    assert topic == "device/network/reachability"
    assert mqtt_client.publish.call_args.kwargs == {"qos": 1, "retain": True}
    data = json.loads(payload)
    assert data["available"] is False
    assert data["value"] == 0
    assert data["sensor"] == "netwatch-reachability"


def test_publish_without_mqtt_is_a_noop(config):
    service = ReachabilityService(config)

    service.publish_status(True)  # no client, nothing raised


def test_publish_errors_are_logged(config, mqtt_client, caplog):
    mqtt_client.publish.side_effect = OSError("socket closed")
    service = ReachabilityService(config)
    service.mqtt_client = mqtt_client

    with caplog.at_level(logging.ERROR, logger="netwatch.reachability.service"):
        service.publish_status(True)

    assert "Failed to publish status: socket closed" in caplog.text


@pytest.mark.asyncio
async def test_run_loop_publishes_initial_status_and_shuts_down(config, mqtt_client):
    probe = DummyProbe(initial_status=PathStatus.UNSATISFIED)
    service = ReachabilityService(config, probe=probe)
    service.mqtt_client = mqtt_client
    service._running = False

    await service.run_loop()

    payloads = [json.loads(c.args[1]) for c in mqtt_client.publish.call_args_list]
    assert payloads
    assert all(p["available"] is False for p in payloads)
    assert service.status_manager.is_network_available is False
    assert probe.started is False


def test_setup_mqtt_failure_leaves_client_unset(config):
    with patch("netwatch.reachability.service.mqtt.Client") as client_cls:
        client_cls.return_value.connect.side_effect = ConnectionRefusedError()
        service = ReachabilityService(config)
        service._setup_mqtt()

    assert service.mqtt_client is None
