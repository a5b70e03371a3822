"""Unit tests for CredentialValidator."""

import pytest

from storefront.domain.services import CredentialValidator, normalize_email


@pytest.fixture
def validator():
    return CredentialValidator()


class TestNormalizeEmail:
    def test_trims_and_lowercases(self):
        assert normalize_email("  Ann@Example.COM ") == "ann@example.com"


class TestValidateRegistration:
    def test_valid_input(self, validator):
        assert validator.validate_registration("Ann", "ann@example.com", "password1") == []

    def test_password_of_exactly_eight_characters(self, validator):
        assert validator.validate_password("12345678") == []

    def test_short_password(self, validator):
        errors = validator.validate_password("1234567")

        assert len(errors) == 1
        assert errors[0].field == "password"
        assert errors[0].code == "password_too_short"

    def test_too_long_password(self, validator):
        errors = validator.validate_password("x" * 101)

        assert errors[0].code == "password_too_long"

    @pytest.mark.parametrize("email", ["", "not-an-email", "ann@", "@example.com", "a b@example.com"])
    def test_invalid_email(self, validator, email):
        errors = validator.validate_email(email)

        assert [e.field for e in errors] == ["email"]

    def test_email_too_long(self, validator):
        email = "a" * 95 + "@example.com"

        assert validator.validate_email(email)[0].code == "email_invalid"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_missing_name(self, validator, name):
        assert validator.validate_name(name)[0].code == "name_required"

    def test_name_too_long(self, validator):
        assert validator.validate_name("n" * 101)[0].code == "name_too_long"

    def test_all_errors_reported_together(self, validator):
        errors = validator.validate_registration("", "bad", "short")

        assert {e.field for e in errors} == {"name", "email", "password"}


class TestValidateLogin:
    def test_short_password_is_not_a_validation_error(self, validator):
        """Login never re-checks the password policy."""
        assert validator.validate_login("ann@example.com", "short") == []

    def test_empty_password(self, validator):
        errors = validator.validate_login("ann@example.com", "")

        assert errors[0].code == "password_required"

    def test_invalid_email(self, validator):
        assert validator.validate_login("nope", "password1")[0].field == "email"


def test_custom_policy():
    validator = CredentialValidator(min_password_length=12)

    assert validator.validate_password("password1")[0].code == "password_too_short"
    assert "12" in validator.validate_password("password1")[0].message
