"""
Tests for settings loading.
"""
import json

import pytest
from pydantic import ValidationError

from deepscan.config import DEFAULT_PROVIDERS, MAX_UPLOAD_BYTES, Settings, load_settings
from deepscan.errors import ConfigurationError


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings({})

        assert settings == Settings()
        assert settings.max_upload_bytes == MAX_UPLOAD_BYTES
        assert settings.detector == "heuristic"
        assert settings.providers == DEFAULT_PROVIDERS
        # reference endpoints ship disabled
        assert settings.enabled_providers == ()

    def test_overrides(self):
        providers = [
            {"name": "sensity", "endpoint": "https://api.sensity.ai/v2/detect", "timeout_seconds": 2.5},
            {"name": "deepware", "endpoint": "https://api.deepware.ai/v1/analyze", "enabled": False},
        ]
        settings = load_settings({
            "DEEPSCAN_MAX_UPLOAD_BYTES": "2048",
            "DEEPSCAN_DETECTOR": "Entropy",
            "DEEPSCAN_MODEL_VERSION": "v4.0.0",
            "DEEPSCAN_PROVIDERS": json.dumps(providers),
            "DEEPSCAN_EXPOSE_ERROR_DETAILS": "false",
            "DEEPSCAN_LOG_LEVEL": "debug",
        })

        assert settings.max_upload_bytes == 2048
        assert settings.detector == "entropy"
        assert settings.model_version == "v4.0.0"
        assert settings.expose_error_details is False
        assert settings.log_level == "DEBUG"
        assert [p.name for p in settings.enabled_providers] == ["sensity"]
        assert settings.enabled_providers[0].timeout_seconds == 2.5

    @pytest.mark.parametrize(
        "env",
        [
            {"DEEPSCAN_MAX_UPLOAD_BYTES": "lots"},
            {"DEEPSCAN_MAX_UPLOAD_BYTES": "0"},
            {"DEEPSCAN_PROVIDERS": "not json"},
            {"DEEPSCAN_PROVIDERS": '{"name": "x"}'},
            {"DEEPSCAN_PROVIDERS": '[{"name": "x"}]'},
            {"DEEPSCAN_PROVIDERS": '[{"name": "x", "endpoint": "https://x", "timeout_seconds": 0}]'},
            {"DEEPSCAN_EXPOSE_ERROR_DETAILS": "maybe"},
        ],
    )
    def test_malformed(self, env):
        with pytest.raises(ConfigurationError):
            load_settings(env)

    def test_settings_are_frozen(self):
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.detector = "entropy"
