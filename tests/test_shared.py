import json
import logging
import logging.handlers

import pytest

from netwatch.shared.logging import setup_logging
from netwatch.shared.mqtt import MQTTConfig, create_status_payload


def test_status_payload():
    data = json.loads(create_status_payload(True, "kiosk-1", timestamp=1700000000.0))

    assert data == {"available": True, "value": 1, "ts": 1700000000.0, "sensor": "kiosk-1"}


def test_mqtt_config_from_dict_defaults():
    config = MQTTConfig.from_dict({"broker": "mqtt.lan"})

    assert config.broker == "mqtt.lan"
    assert config.port == 1883
    assert config.qos == 1


@pytest.fixture
def root_logger():
    """Restore the root logger after setup_logging replaces its handlers"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_quiets_noisy_loggers(root_logger):
    setup_logging("DEBUG", quiet_loggers=["urllib3"])

    assert root_logger.level == logging.DEBUG
    assert logging.getLogger("paho").level == logging.WARNING
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_setup_logging_writes_rotating_log_file(root_logger, tmp_path):
    log_file = tmp_path / "netwatch.log"

    setup_logging("INFO", log_file=str(log_file))
    logging.getLogger("netwatch.test").info("Network status updated - available: False")
    for handler in root_logger.handlers:
        handler.flush()

    assert any(
        isinstance(h, logging.handlers.RotatingFileHandler) for h in root_logger.handlers
    )
    assert "netwatch.test - INFO - Network status updated - available: False" in log_file.read_text()


def test_setup_logging_replaces_previous_handlers(root_logger, tmp_path):
    setup_logging("INFO", log_file=str(tmp_path / "first.log"))
    setup_logging("INFO")

    assert not any(
        isinstance(h, logging.handlers.RotatingFileHandler) for h in root_logger.handlers
    )
