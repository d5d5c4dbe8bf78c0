"""Unit tests for configuration loading."""

import pytest

from lightsout.config import ConfigError, LightsoutConfig, _get_env, _get_env_int


class TestConfig:
    """Test configuration defaults and environment loading."""

    def test_default_values(self):
        """Config has sensible defaults."""
        config = LightsoutConfig.from_env({})

        assert config.host == "0.0.0.0"
        assert config.port == 8808
        assert config.inactivity_timeout == 90
        assert config.keep_online is False
        assert config.log_level == "INFO"
        assert config.client == "rest"
        assert config.fallback_container == "github-actions-runner"

    def test_env_overrides(self):
        """Environment variables override defaults."""
        config = LightsoutConfig.from_env({
            "PORT": "9000",
            "INACTIVITY_TIMEOUT": "300",
            "LOG_LEVEL": "debug",
            "GCP_PROJECT": "proj",
            "GCP_ZONE": "us-central1-f",
            "GCP_INSTANCE_NAME": "vm-1",
            "LIGHTSOUT_CLIENT": "SDK",
        })

        assert config.port == 9000
        assert config.inactivity_timeout == 300
        assert config.log_level == "DEBUG"
        assert config.client == "sdk"
        assert config.has_instance_identity is True

    def test_keep_online_requires_yes(self):
        """Only the literal 'yes' enables keep-online."""
        assert LightsoutConfig.from_env({"LIBOPS_KEEP_ONLINE": "yes"}).keep_online is True
        assert LightsoutConfig.from_env({"LIBOPS_KEEP_ONLINE": "true"}).keep_online is False
        assert LightsoutConfig.from_env({"LIBOPS_KEEP_ONLINE": ""}).keep_online is False

    @pytest.mark.parametrize("raw", ["abc", "0", "-5", ""])
    def test_bad_timeout_falls_back_to_default(self, raw):
        """Unparseable or non-positive timeouts use the default."""
        config = LightsoutConfig.from_env({"INACTIVITY_TIMEOUT": raw})

        assert config.inactivity_timeout == 90

    def test_empty_fallback_container_disables_probe(self):
        """An explicitly empty container name is kept empty."""
        config = LightsoutConfig.from_env({"FALLBACK_CONTAINER": ""})

        assert config.fallback_container == ""

    def test_missing_identity_field(self):
        """Identity is incomplete when any field is missing."""
        config = LightsoutConfig.from_env({"GCP_PROJECT": "proj", "GCP_ZONE": "zone"})

        assert config.has_instance_identity is False

    def test_unknown_client_rejected(self):
        """Unknown strategies raise ConfigError."""
        with pytest.raises(ConfigError):
            LightsoutConfig(client="carrier-pigeon")

    def test_non_positive_timeout_rejected(self):
        """Explicit non-positive timeout raises ConfigError."""
        with pytest.raises(ConfigError):
            LightsoutConfig(inactivity_timeout=0)

    def test_config_is_immutable(self):
        """Config dataclass is frozen."""
        config = LightsoutConfig()

        with pytest.raises(Exception):  # FrozenInstanceError
            config.port = 8080

    def test_with_overrides_ignores_none(self):
        """None overrides leave values untouched."""
        config = LightsoutConfig(port=1234)

        updated = config.with_overrides(port=None, keep_online=True)

        assert updated.port == 1234
        assert updated.keep_online is True

    def test_with_overrides_validates(self):
        """Overrides go through validation."""
        with pytest.raises(ConfigError):
            LightsoutConfig().with_overrides(inactivity_timeout=-1)


class TestEnvHelpers:
    """Test environment variable helpers."""

    def test_get_env_returns_default(self):
        """Returns default when key missing or empty."""
        assert _get_env({}, "MISSING", "default") == "default"
        assert _get_env({"EMPTY": ""}, "EMPTY", "default") == "default"

    def test_get_env_int_converts(self):
        """Converts string to int."""
        result = _get_env_int({"TEST_INT": "42"}, "TEST_INT", 0)

        assert result == 42
        assert isinstance(result, int)
