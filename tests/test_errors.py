"""Tests for the error hierarchy."""

from natours_core.errors import (
    Forbidden,
    IdentityNotFound,
    InvalidCredentials,
    NatoursError,
    NotificationFailed,
    TokenExpired,
    TokenVerificationError,
    ValidationFailed,
)


class TestErrors:

    def test_to_dict(self):
        err = InvalidCredentials()
        assert err.to_dict() == {
            "success": False,
            "error": "Incorrect email or password.",
            "error_code": "INVALID_CREDENTIALS",
        }
        assert err.status_code == 401

    def test_custom_message_keeps_kind(self):
        err = Forbidden("Admins only")
        assert err.message == "Admins only"
        assert str(err) == "Admins only"
        assert err.error_code == "FORBIDDEN"
        assert err.status_code == 403

    def test_validation_details(self):
        err = ValidationFailed(field_errors={"email": ["Email address is not valid."]})
        assert err.status_code == 400
        assert err.to_dict()["details"] == {"fields": {"email": ["Email address is not valid."]}}

    def test_token_errors_share_a_base(self):
        for cls in (TokenExpired, IdentityNotFound):
            err = cls()
            assert isinstance(err, TokenVerificationError)
            assert err.status_code == 401

    def test_base_defaults(self):
        err = NatoursError()
        assert err.status_code == 500
        assert err.error_code == "INTERNAL_ERROR"
        assert NotificationFailed().status_code == 500
