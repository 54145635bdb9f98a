"""Tests for password hashing."""

from natours_core.auth.password import hash_password, verify_password


class TestPasswordHashing:
    """hash_password / verify_password behaviour."""

    def test_verify_accepts_matching_password(self):
        digest = hash_password("longpass1")
        assert verify_password("longpass1", digest) is True

    def test_verify_rejects_other_password(self):
        digest = hash_password("longpass1")
        assert verify_password("longpass2", digest) is False
        assert verify_password("LONGPASS1", digest) is False

    def test_same_password_hashes_differently(self):
        """Salt is random per call."""
        first = hash_password("longpass1")
        second = hash_password("longpass1")
        assert first != second
        assert verify_password("longpass1", first)
        assert verify_password("longpass1", second)

    def test_hash_is_not_plaintext(self):
        digest = hash_password("longpass1")
        assert "longpass1" not in digest
        assert digest.startswith("$2")

    def test_verify_never_raises(self):
        assert verify_password("longpass1", "") is False
        assert verify_password("", hash_password("longpass1")) is False
        assert verify_password("longpass1", "not-a-bcrypt-hash") is False
        assert verify_password(None, None) is False
