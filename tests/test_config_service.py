import json

import pytest

from services.impl.config_service import ConfigService
from services.pipeline_orchestrator import DEFAULT_CONFIG_PATH


def _write(tmp_path, config):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return str(path)


def test_repository_config_loads_with_expected_values():
    config = ConfigService(DEFAULT_CONFIG_PATH)

    assert config.getQrBackend() == "zxing"
    assert config.getAdultAge() == 18
    assert config.getReferencePrefixLength() == 4
    assert config.isDecompressionEnabled() is True
    assert config.isDebugEnabled() is False


def test_dot_notation_reads_nested_values(tmp_path):
    config = ConfigService(_write(tmp_path, {"s1_camera": {"frameWidth": 640}}))

    assert config.get("s1_camera.frameWidth") == 640
    assert config.get("s1_camera.frameHeight", 480) == 480
    assert config.get("s1_camera.frameWidth.deeper", "x") == "x"


def test_missing_keys_fall_back_to_defaults(tmp_path):
    config = ConfigService(_write(tmp_path, {}))

    assert config.getFrameWidth() == 1280
    assert config.getFrameHeight() == 720
    assert config.getPollIntervalMs() == 100
    assert config.getMaxConsecutiveReadFailures() == 30
    assert config.getScanLongEdges() == [800, 1000, 1200]
    assert config.getMaxAgeYears() == 120
    assert config.getVerificationQrErrorCorrection() == "H"
    assert config.getServiceConfig("s2_qr_localization") == {}


def test_backend_name_is_case_insensitive(tmp_path):
    config = ConfigService(_write(tmp_path, {"s2_qr_localization": {"backend": "PyZbar"}}))

    assert config.getQrBackend() == "pyzbar"


def test_debug_flag_can_be_toggled(tmp_path):
    config = ConfigService(_write(tmp_path, {"debug": {"enabled": True}}))
    assert config.isDebugEnabled() is True

    config.setDebugEnabled(False)

    assert config.isDebugEnabled() is False


def test_missing_file_raises(tmp_path):
    with pytest.raises(RuntimeError):
        ConfigService(str(tmp_path / "absent.json"))


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(RuntimeError):
        ConfigService(str(path))
