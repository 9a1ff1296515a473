"""Tests for shared enums."""

import pytest

from oss_output.contracts.enums import CannedAcl, SessionState


class TestSessionState:
    def test_values_are_lowercase_strings(self) -> None:
        assert SessionState.IDLE == "idle"
        assert SessionState.OPEN == "open"
        assert SessionState.FAILED == "failed"


class TestCannedAclParse:
    """CannedAcl.parse accepts wire values and SDK constant names."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("default", CannedAcl.DEFAULT),
            ("Default", CannedAcl.DEFAULT),
            ("private", CannedAcl.PRIVATE),
            ("Private", CannedAcl.PRIVATE),
            ("public-read", CannedAcl.PUBLIC_READ),
            ("PublicRead", CannedAcl.PUBLIC_READ),
            ("PUBLIC_READ", CannedAcl.PUBLIC_READ),
            ("public-read-write", CannedAcl.PUBLIC_READ_WRITE),
            ("PublicReadWrite", CannedAcl.PUBLIC_READ_WRITE),
            ("  private  ", CannedAcl.PRIVATE),
        ],
    )
    def test_accepts_known_spellings(self, raw: str, expected: CannedAcl) -> None:
        assert CannedAcl.parse(raw) is expected

    def test_unknown_value_lists_valid_choices(self) -> None:
        with pytest.raises(ValueError, match="Unknown canned ACL 'authenticated-read'") as exc_info:
            CannedAcl.parse("authenticated-read")

        assert "public-read-write" in str(exc_info.value)

    def test_wire_value_is_enum_value(self) -> None:
        assert CannedAcl.PUBLIC_READ.value == "public-read"
