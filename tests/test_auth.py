import time

import pytest

from storefront import models
from storefront.auth import TokenService, hash_password, verify_password
from storefront.errors import ErrorKind, ServiceError

SECRET = "unit-test-secret-that-is-long-enough"


def _user(**overrides):
    fields = {"id": 7, "email": "c@c.c", "first_name": "a", "last_name": "b", "is_admin": False}
    fields.update(overrides)
    return models.User(**fields)


def test_password_hash_roundtrip_with_pepper():
    hashed = hash_password("secret", "pepper")
    assert hashed != "secret"
    assert verify_password("secret", hashed, "pepper")
    assert not verify_password("secret", hashed, "other")
    assert not verify_password("wrong", hashed, "pepper")


def test_issue_and_verify_claims():
    service = TokenService(SECRET)
    claims = service.verify(service.issue(_user()))
    assert claims.user_id == 7
    assert claims.roles == []
    assert claims.permissions == []
    assert claims.subject == "c@c.c"
    assert not claims.is_admin


def test_admin_role_claim():
    service = TokenService(SECRET)
    claims = service.verify(service.issue(_user(is_admin=True)))
    assert claims.roles == ["admin"]
    assert claims.is_admin


def test_token_expires_after_one_day_by_default():
    service = TokenService(SECRET)
    claims = service.verify(service.issue(_user()))
    assert 60 * 60 * 24 - 5 <= claims.expires_at - int(time.time()) <= 60 * 60 * 24


def test_expired_token_is_rejected():
    service = TokenService(SECRET)
    token = service.issue(_user(), expires_in=-10)
    with pytest.raises(ServiceError) as exc:
        service.verify(token)
    assert exc.value.kind is ErrorKind.UNAUTHENTICATED
    assert exc.value.status_code == 401


def test_token_signed_with_another_secret_is_rejected():
    token = TokenService("one-" + SECRET).issue(_user())
    with pytest.raises(ServiceError) as exc:
        TokenService("two-" + SECRET).verify(token)
    assert exc.value.kind is ErrorKind.UNAUTHENTICATED


def test_garbage_token_is_rejected():
    with pytest.raises(ServiceError) as exc:
        TokenService(SECRET).verify("not-a-token")
    assert exc.value.kind is ErrorKind.UNAUTHENTICATED
