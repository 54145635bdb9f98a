"""Tests for the credential store."""

from datetime import timedelta

import pytest

from natours_core.db import UserRole
from natours_core.errors import EmailAlreadyRegistered
from natours_core.utils.datetime import to_utc


class TestCreateAndFind:

    def test_email_is_normalized(self, store, make_user):
        user = make_user(email="  Ana@Example.COM ")
        assert user.email == "ana@example.com"
        assert store.find_by_email("ANA@example.com").id == user.id

    def test_defaults(self, make_user):
        user = make_user()
        assert user.role == UserRole.USER
        assert user.active is True
        assert user.photo == "default.jpg"
        assert user.password_reset_token is None
        assert user.password_reset_expires is None

    def test_duplicate_email_rejected(self, make_user):
        make_user(email="a@x.com")
        with pytest.raises(EmailAlreadyRegistered):
            make_user(email="A@X.com")

    def test_empty_hash_rejected(self, store):
        with pytest.raises(ValueError):
            store.create(name="Ana", email="a@x.com", password_hash="")

    def test_find_by_id(self, store, make_user):
        user = make_user()
        assert store.find_by_id(user.id).email == user.email
        assert store.find_by_id("missing") is None
        assert store.find_by_id("") is None

    def test_public_dict_has_no_credentials(self, make_user):
        data = make_user(role=UserRole.LEAD_GUIDE).to_public_dict()
        assert data["role"] == "lead-guide"
        assert "password_hash" not in data
        assert "password_reset_token" not in data


class TestUpdates:

    def test_inactive_users_are_invisible(self, store, make_user):
        user = make_user()
        store.deactivate(user.id)
        assert store.find_by_email(user.email) is None
        assert store.find_by_id(user.id) is None
        assert store.list_users() == []

    def test_set_and_clear_reset_token(self, store, make_user, clock):
        user = make_user()
        expires = clock() + timedelta(minutes=10)
        store.set_reset_token(user.id, "abc123", expires)
        found = store.find_by_reset_hash("abc123", clock())
        assert found.id == user.id
        assert to_utc(found.password_reset_expires) == expires

        store.clear_reset_token(user.id)
        assert store.find_by_reset_hash("abc123", clock()) is None
        assert user.password_reset_token is None
        assert user.password_reset_expires is None

    def test_set_password_only_touches_password_fields(self, store, make_user, clock):
        user = make_user()
        store.set_reset_token(user.id, "abc123", clock() + timedelta(minutes=10))
        store.set_password(user.id, "$2b$04$replacement", clock())
        fresh = store.find_by_id(user.id)
        assert fresh.password_hash == "$2b$04$replacement"
        assert to_utc(fresh.password_changed_at) == clock()
        assert fresh.password_reset_token == "abc123"

    def test_apply_password_reset_clears_token(self, store, make_user, clock):
        user = make_user()
        store.set_reset_token(user.id, "abc123", clock() + timedelta(minutes=10))
        assert store.apply_password_reset(user.id, "abc123", "$2b$04$new", clock(), clock())
        fresh = store.find_by_id(user.id)
        assert fresh.password_hash == "$2b$04$new"
        assert fresh.password_reset_token is None
        assert fresh.password_reset_expires is None

    def test_apply_password_reset_refuses_expired_token(self, store, make_user, clock):
        user = make_user()
        store.set_reset_token(user.id, "abc123", clock() + timedelta(minutes=10))
        clock.advance(minutes=11)
        assert not store.apply_password_reset(user.id, "abc123", "$2b$04$new", clock(), clock())
        assert store.find_by_id(user.id).password_hash != "$2b$04$new"

    def test_list_users(self, store, make_user):
        make_user(email="a@x.com")
        make_user(email="b@x.com")
        assert {u.email for u in store.list_users()} == {"a@x.com", "b@x.com"}
