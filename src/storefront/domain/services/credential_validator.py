"""Credential input validation.

Validates the fields accepted by registration, login and profile updates:
- Display name length
- Email syntax
- Minimum password length
"""

from email_validator import EmailNotValidError, validate_email

from storefront.domain.services.auth_result import FieldError


def normalize_email(email: str) -> str:
    """Trim and lower-case an email address for storage and lookup."""
    return email.strip().lower()


class CredentialValidator:
    """Validates credential fields.

    Default policy:
    - Name between 1 and 100 characters
    - Syntactically valid email, at most 100 characters
    - Password of at least 8 characters
    """

    def __init__(
        self,
        min_password_length: int = 8,
        max_password_length: int = 100,
        max_name_length: int = 100,
        max_email_length: int = 100,
    ) -> None:
        self.min_password_length = min_password_length
        self.max_password_length = max_password_length
        self.max_name_length = max_name_length
        self.max_email_length = max_email_length

    def validate_name(self, name: str | None) -> list[FieldError]:
        if name is None or not name.strip():
            return [FieldError(field="name", message="Name is required.", code="name_required")]
        if len(name) > self.max_name_length:
            return [
                FieldError(
                    field="name",
                    message=f"Name must be at most {self.max_name_length} characters.",
                    code="name_too_long",
                )
            ]
        return []

    def validate_email(self, email: str | None) -> list[FieldError]:
        invalid = FieldError(
            field="email",
            message="Please enter a valid email address.",
            code="email_invalid",
        )
        if not email or len(email) > self.max_email_length:
            return [invalid]
        try:
            validate_email(email.strip(), check_deliverability=False)
        except EmailNotValidError:
            return [invalid]
        return []

    def validate_password(self, password: str | None) -> list[FieldError]:
        if password is None or len(password) < self.min_password_length:
            return [
                FieldError(
                    field="password",
                    message=(
                        "Password is required. It must be at least "
                        f"{self.min_password_length} characters long."
                    ),
                    code="password_too_short",
                )
            ]
        if len(password) > self.max_password_length:
            return [
                FieldError(
                    field="password",
                    message=f"Password must be at most {self.max_password_length} characters.",
                    code="password_too_long",
                )
            ]
        return []

    def validate_registration(self, name: str, email: str, password: str) -> list[FieldError]:
        """Validate registration input.

        Returns:
            List of validation errors. Empty list if the input is valid.
        """
        return (
            self.validate_name(name)
            + self.validate_email(email)
            + self.validate_password(password)
        )

    def validate_login(self, email: str, password: str) -> list[FieldError]:
        # Password policy is not re-checked at login; a wrong password is a
        # credential failure, not a validation failure.
        errors = self.validate_email(email)
        if not password:
            errors.append(
                FieldError(field="password", message="Password is required.", code="password_required")
            )
        return errors


# Default validator instance
default_credential_validator = CredentialValidator()
