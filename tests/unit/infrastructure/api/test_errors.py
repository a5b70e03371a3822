import json

import pytest

from storefront.domain.services import AuthErrorKind, AuthFailure, FieldError
from storefront.infrastructure.api.errors import failure_response


def _body(response) -> dict:
    return json.loads(response.body)


@pytest.mark.parametrize(
    ("kind", "status_code"),
    [
        (AuthErrorKind.DUPLICATE_EMAIL, 400),
        (AuthErrorKind.INVALID_CREDENTIALS, 401),
        (AuthErrorKind.NO_ACTIVE_SESSION, 401),
        (AuthErrorKind.ACCOUNT_NOT_FOUND, 404),
        (AuthErrorKind.UNEXPECTED, 500),
    ],
)
def test_status_follows_failure_kind(kind, status_code):
    response = failure_response(AuthFailure(kind=kind, message="Nope"))

    assert response.status_code == status_code
    assert _body(response) == {"error": kind.value, "message": "Nope"}


def test_validation_details_are_listed():
    failure = AuthFailure(
        kind=AuthErrorKind.VALIDATION_ERROR,
        message="Validation failed",
        details=(FieldError("email", "Invalid email address", "invalid_email"),),
    )

    body = _body(failure_response(failure))

    assert body["details"] == [
        {"field": "email", "message": "Invalid email address", "code": "invalid_email"}
    ]
