import pytest
from rest_framework_simplejwt.tokens import RefreshToken

from order.ws_middleware import token_from_scope, user_id_from_token

pytestmark = pytest.mark.django_db


def test_signup_login_and_cookie_authentication(api_client):
    signup = api_client.post(
        "/api/v1/user/signup/",
        {"email": "new@example.com", "name": "New", "password1": "tall-giraffe-42", "password2": "tall-giraffe-42"},
        format="json",
    )
    assert signup.status_code == 201

    login = api_client.post(
        "/api/v1/user/login/", {"email": "new@example.com", "password": "tall-giraffe-42"}, format="json"
    )
    assert login.status_code == 200
    assert "access_token" in login.cookies

    # the cookie alone authenticates the next request
    profile = api_client.get("/api/v1/user/profile/")
    assert profile.status_code == 200
    assert profile.data["email"] == "new@example.com"


def test_signup_rejects_mismatched_passwords(api_client):
    response = api_client.post(
        "/api/v1/user/signup/",
        {"email": "x@example.com", "name": "X", "password1": "tall-giraffe-42", "password2": "other-giraffe-42"},
        format="json",
    )

    assert response.status_code == 400
    assert response.data["error"] == "invalid_input"


def test_login_with_wrong_password(api_client, user):
    response = api_client.post(
        "/api/v1/user/login/", {"email": user.email, "password": "nope"}, format="json"
    )

    assert response.status_code == 401


def test_token_from_websocket_scope():
    scope = {"headers": [(b"cookie", b"theme=dark; access_token=abc.def.ghi")]}

    assert token_from_scope(scope) == "abc.def.ghi"
    assert token_from_scope({"headers": []}) is None


def test_websocket_accepts_only_access_tokens(user):
    refresh = RefreshToken.for_user(user)

    assert str(user_id_from_token(str(refresh.access_token))) == str(user.id)
    assert user_id_from_token(str(refresh)) is None
    assert user_id_from_token("not-a-jwt") is None
