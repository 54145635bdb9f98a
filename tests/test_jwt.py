"""Tests for bearer token minting and verification."""

from datetime import timedelta

import pytest
from jose import jwt

from natours_core.auth import TokenIssuer, password_changed_after
from natours_core.errors import (
    IdentityNotFound,
    InvalidSignature,
    PasswordChangedSinceTokenIssued,
    TokenExpired,
)
from natours_core.utils.datetime import to_timestamp

from .conftest import TEST_SECRET


class TestMintAndDecode:
    """Signature and expiry checks."""

    def test_mint_then_decode_roundtrip(self, issuer, clock):
        token = issuer.mint("user-1")
        data = issuer.decode(token)
        assert data.sub == "user-1"
        assert data.iat == to_timestamp(clock())
        assert data.exp > data.iat

    def test_lifetime_comes_from_settings(self, issuer, settings):
        data = issuer.decode(issuer.mint("user-1"))
        assert data.exp - data.iat == settings.JWT_EXPIRES_IN_DAYS * 24 * 60 * 60

    def test_tampered_token_rejected(self, issuer):
        token = issuer.mint("user-1")
        header, payload, signature = token.split(".")
        forged = jwt.encode({"sub": "admin-1", "iat": 0, "exp": 9999999999}, "other-secret")
        tampered = ".".join([header, forged.split(".")[1], signature])
        with pytest.raises(InvalidSignature):
            issuer.decode(tampered)

    def test_foreign_secret_rejected(self, clock):
        other = TokenIssuer("another-secret", timedelta(days=1), clock=clock)
        mine = TokenIssuer(TEST_SECRET, timedelta(days=1), clock=clock)
        with pytest.raises(InvalidSignature):
            mine.decode(other.mint("user-1"))

    def test_garbage_rejected(self, issuer):
        with pytest.raises(InvalidSignature):
            issuer.decode("not.a.jwt")

    def test_missing_claims_rejected(self, issuer):
        token = jwt.encode({"sub": "user-1"}, TEST_SECRET, algorithm="HS256")
        with pytest.raises(InvalidSignature):
            issuer.decode(token)

    def test_expired_token_rejected(self, clock):
        issuer = TokenIssuer(TEST_SECRET, timedelta(hours=1), clock=clock)
        token = issuer.mint("user-1")
        clock.advance(hours=1)
        with pytest.raises(TokenExpired):
            issuer.decode(token)

    def test_token_valid_just_before_expiry(self, clock):
        issuer = TokenIssuer(TEST_SECRET, timedelta(hours=1), clock=clock)
        token = issuer.mint("user-1")
        clock.advance(minutes=59)
        assert issuer.decode(token).sub == "user-1"

    def test_constructor_rejects_bad_config(self):
        with pytest.raises(ValueError):
            TokenIssuer("", timedelta(days=1))
        with pytest.raises(ValueError):
            TokenIssuer("secret", timedelta(0))


class TestVerify:
    """Full verification against the credential store."""

    def test_verify_resolves_user(self, issuer, store, make_user):
        user = make_user()
        token = issuer.mint(user.id)
        assert issuer.verify(token, store).id == user.id

    def test_unknown_subject(self, issuer, store):
        with pytest.raises(IdentityNotFound):
            issuer.verify(issuer.mint("no-such-user"), store)

    def test_inactive_subject(self, issuer, store, make_user):
        user = make_user()
        token = issuer.mint(user.id)
        store.deactivate(user.id)
        with pytest.raises(IdentityNotFound):
            issuer.verify(token, store)

    def test_password_changed_after_issue(self, issuer, store, make_user, clock):
        user = make_user()
        token = issuer.mint(user.id)
        store.set_password(user.id, user.password_hash, changed_at=clock() + timedelta(seconds=1))
        with pytest.raises(PasswordChangedSinceTokenIssued):
            issuer.verify(token, store)

    def test_password_changed_before_issue(self, issuer, store, make_user, clock):
        user = make_user()
        store.set_password(user.id, user.password_hash, changed_at=clock() - timedelta(seconds=1))
        token = issuer.mint(user.id)
        assert issuer.verify(token, store).id == user.id

    def test_password_changed_after_helper(self, make_user, clock):
        user = make_user()
        iat = to_timestamp(clock())
        assert password_changed_after(user, iat) is False
        user.password_changed_at = clock() + timedelta(seconds=5)
        assert password_changed_after(user, iat) is True
        user.password_changed_at = clock()
        assert password_changed_after(user, iat) is False
