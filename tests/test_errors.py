"""api_error body and status mapping."""

import pytest

from safety_vitals.utils.errors import _DEFAULT_STATUS, E, api_error


def _codes():
    return {value for name, value in vars(E).items() if name.isupper()}


def test_every_code_has_a_default_status():
    assert _codes() == set(_DEFAULT_STATUS)


@pytest.mark.parametrize("code,status", [
    (E.VALIDATION_INVALID, 400),
    (E.NOT_FOUND, 404),
    (E.CONFLICT_DUPLICATE, 409),
    (E.DATABASE, 500),
    (E.INTERNAL, 500),
])
def test_default_status(app, code, status):
    with app.test_request_context():
        response, http_status = api_error(code, "boom")
    assert http_status == status
    assert response.get_json() == {"error": "boom", "code": code}


def test_status_override_and_details(app):
    with app.test_request_context():
        response, http_status = api_error(E.UPSTREAM, "Bad gateway", status=502,
                                          details={"body": "timeout"})
    assert http_status == 502
    assert response.get_json()["details"] == {"body": "timeout"}
