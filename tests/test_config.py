"""Tests for BridgeSettings."""

import pytest
from pydantic import ValidationError

from oscoca.config import BridgeSettings


class TestBridgeSettings:
    """Tests for BridgeSettings model."""

    def test_defaults(self):
        """Test default listen address and buffer size."""
        settings = BridgeSettings()
        assert settings.address == ("0.0.0.0", 8000)
        assert settings.max_datagram_size == 1500

    def test_from_env(self):
        """Test OSCOCA_* variables override defaults."""
        settings = BridgeSettings.from_env({
            "OSCOCA_HOST": "127.0.0.1",
            "OSCOCA_PORT": "9000",
            "UNRELATED": "x",
        })
        assert settings.address == ("127.0.0.1", 9000)
        assert settings.max_datagram_size == 1500

    def test_from_os_environ(self, monkeypatch):
        """Test os.environ is read when no mapping is given."""
        monkeypatch.setenv("OSCOCA_MAX_DATAGRAM_SIZE", "4096")
        monkeypatch.delenv("OSCOCA_PORT", raising=False)
        settings = BridgeSettings.from_env()
        assert settings.max_datagram_size == 4096
        assert settings.port == 8000

    @pytest.mark.parametrize("port", [-1, 65536])
    def test_invalid_port(self, port):
        """Test ports outside 0..65535 are rejected."""
        with pytest.raises(ValidationError):
            BridgeSettings(port=port)

    def test_port_zero_allowed(self):
        """Test port 0 is accepted for an ephemeral port."""
        assert BridgeSettings(port=0).port == 0

    def test_invalid_env_value(self):
        """Test a non-numeric port from the environment is rejected."""
        with pytest.raises(ValidationError):
            BridgeSettings.from_env({"OSCOCA_PORT": "eighty"})

    def test_empty_host(self):
        """Test an empty host is rejected."""
        with pytest.raises(ValidationError):
            BridgeSettings(host="")

    def test_frozen(self):
        """Test settings cannot be changed after creation."""
        settings = BridgeSettings()
        with pytest.raises(ValidationError):
            settings.port = 9000
