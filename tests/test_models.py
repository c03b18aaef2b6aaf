"""Tests for OCP.1 command models."""

import pytest
from pydantic import ValidationError

from oscoca.ocp1.constants import OcaStatus
from oscoca.ocp1.models import (
    OcaMethodID,
    OcaObjectSearchResult,
    Ocp1Command,
    Ocp1Parameters,
    Ocp1Response,
)


class TestOcaMethodID:
    """Tests for OcaMethodID."""

    def test_from_string(self):
        """Test parsing a method token."""
        method_id = OcaMethodID.from_string("4.2")
        assert method_id.def_level == 4
        assert method_id.method_index == 2

    def test_str_round_trip(self):
        """Test the text form."""
        assert str(OcaMethodID.from_string("12.345")) == "12.345"

    def test_max_components(self):
        """Test both components accept the full uint16 range."""
        method_id = OcaMethodID.from_string("65535.65535")
        assert (method_id.def_level, method_id.method_index) == (65535, 65535)

    @pytest.mark.parametrize(
        "token",
        ["4", "4.", ".2", "4.2.1", "a.b", "-1.2", "4 .2", "+4.2", "", "65536.1", "1.65536"],
    )
    def test_invalid_tokens(self, token):
        """Test malformed or out-of-range tokens are rejected."""
        with pytest.raises(ValueError):
            OcaMethodID.from_string(token)

    def test_non_ascii_digits_rejected(self):
        """Test only ASCII digits are accepted."""
        with pytest.raises(ValueError):
            OcaMethodID.from_string("٤.٢")

    def test_hashable_and_equal(self):
        """Test method IDs work as dictionary keys."""
        table = {OcaMethodID(def_level=4, method_index=2): "SetGain"}
        assert table[OcaMethodID.from_string("4.2")] == "SetGain"


class TestOcp1Parameters:
    """Tests for Ocp1Parameters."""

    def test_defaults(self):
        """Test empty parameters."""
        params = Ocp1Parameters()
        assert params.parameter_count == 0
        assert params.parameter_data == b""

    def test_count_limit(self):
        """Test the count must fit in one byte."""
        with pytest.raises(ValidationError):
            Ocp1Parameters(parameter_count=256)


class TestOcp1Command:
    """Tests for Ocp1Command."""

    def test_default_handle(self):
        """Test commands use the unused handle sentinel."""
        command = Ocp1Command(target_ono=4096, method_id=OcaMethodID.from_string("4.2"))
        assert command.handle == 0
        assert command.parameters == Ocp1Parameters()

    def test_frozen(self):
        """Test commands are immutable."""
        command = Ocp1Command(target_ono=4096, method_id=OcaMethodID.from_string("4.2"))
        with pytest.raises(ValidationError):
            command.target_ono = 1

    def test_repr(self):
        """Test repr shows target and method."""
        command = Ocp1Command(target_ono=4096, method_id=OcaMethodID.from_string("4.2"))
        assert "target=4096" in repr(command)
        assert "method=4.2" in repr(command)


class TestOcp1Response:
    """Tests for Ocp1Response."""

    def test_is_ok(self):
        """Test the OK check."""
        assert Ocp1Response().is_ok is True
        assert Ocp1Response(status_code=OcaStatus.BAD_ONO).is_ok is False


class TestOcaObjectSearchResult:
    """Tests for OcaObjectSearchResult."""

    def test_fields_optional(self):
        """Test unrequested fields stay None."""
        result = OcaObjectSearchResult(ono=4096)
        assert result.ono == 4096
        assert result.role is None
        assert result.container_path is None
