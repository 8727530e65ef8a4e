"""Unit tests for prefixed, time-ordered identifiers."""

from tollgate_auth.shared.identifiers import (
    is_valid_typeid,
    new_oauth_account_id,
    new_session_id,
    new_typeid,
    new_user_id,
)


class TestIdentifiers:
    """Tests for identifier generation and validation."""

    def test_prefixes(self):
        """Each kind of identifier carries its own prefix."""
        assert new_user_id().startswith("user_")
        assert new_session_id().startswith("sess_")
        assert new_oauth_account_id().startswith("oauth_")

    def test_suffix_is_26_base32_characters(self):
        """The suffix has the fixed length of a base32 encoded 128-bit value."""
        suffix = new_user_id().split("_", 1)[1]

        assert len(suffix) == 26
        assert set(suffix) <= set("0123456789abcdefghjkmnpqrstvwxyz")

    def test_generated_ids_are_valid(self):
        """Generated identifiers pass validation with their prefix."""
        assert is_valid_typeid(new_user_id(), "user")
        assert is_valid_typeid(new_session_id(), "sess")
        assert not is_valid_typeid(new_session_id(), "user")

    def test_invalid_ids_rejected(self):
        """Malformed identifiers are rejected."""
        assert not is_valid_typeid("")
        assert not is_valid_typeid("user")
        assert not is_valid_typeid("user_tooshort")
        assert not is_valid_typeid("User_" + "0" * 26)

    def test_ids_sort_by_creation_time(self):
        """Identifiers minted later sort after earlier ones."""
        earlier = new_typeid("sess", timestamp_ms=1_700_000_000_000)
        later = new_typeid("sess", timestamp_ms=1_700_000_000_001)

        assert earlier < later

    def test_ids_are_unique(self):
        """Identifiers from the same millisecond still differ."""
        ids = {new_typeid("user", timestamp_ms=1_700_000_000_000) for _ in range(100)}

        assert len(ids) == 100
