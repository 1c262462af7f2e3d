"""Tests for the identity provider HTTP client."""

from __future__ import annotations

from unittest import mock

import pytest
import requests

from auth_api.errors import (
    AuthenticationFailed,
    DuplicateUser,
    IdentityProviderUnavailable,
    ProviderDeleteFailed,
    ProviderRejected,
)
from auth_api.services.identity_provider import IdentityProviderClient, build_user_representation


def _response(status_code: int, payload=None, headers=None) -> mock.Mock:
    response = mock.Mock(status_code=status_code, headers=headers or {})
    response.json.return_value = payload
    return response


@pytest.fixture
def session() -> mock.Mock:
    return mock.Mock(spec=requests.Session)


@pytest.fixture
def client(session) -> IdentityProviderClient:
    return IdentityProviderClient(base_url="http://idp/", realm="Istio", client_id="Istio", timeout=3, session=session)


def test_login_posts_password_grant(client, session):
    session.request.return_value = _response(200, {"access_token": "abc"})

    assert client.login("a@x.com", "pw") == {"access_token": "abc"}

    method, url = session.request.call_args.args
    kwargs = session.request.call_args.kwargs
    assert (method, url) == ("POST", "http://idp/realms/Istio/protocol/openid-connect/token")
    assert kwargs["data"]["grant_type"] == "password"
    assert kwargs["data"]["username"] == "a@x.com"
    assert kwargs["timeout"] == 3
    assert "Authorization" not in kwargs["headers"]


def test_login_rejected(client, session):
    session.request.return_value = _response(401)

    with pytest.raises(AuthenticationFailed):
        client.login("a@x.com", "wrong")


def test_transport_failure_is_unavailable(client, session):
    session.request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(IdentityProviderUnavailable):
        client.login("a@x.com", "pw")


def test_create_user_reads_id_from_location(client, session):
    session.request.return_value = _response(
        201, headers={"Location": "http://idp/admin/realms/Istio/users/7d1c-42"}
    )
    representation = build_user_representation("a@x.com", "A", "B", "pw", "Addr", "host")

    assert client.create_user(representation, "admin-token") == "7d1c-42"

    kwargs = session.request.call_args.kwargs
    assert kwargs["headers"]["Authorization"] == "Bearer admin-token"
    assert kwargs["json"]["credentials"][0]["value"] == "pw"


@pytest.mark.parametrize("status_code, error", [(409, DuplicateUser), (400, ProviderRejected)])
def test_create_user_failures(client, session, status_code, error):
    session.request.return_value = _response(status_code)

    with pytest.raises(error):
        client.create_user({}, "admin-token")


def test_create_user_without_location(client, session):
    session.request.return_value = _response(201)

    with pytest.raises(ProviderRejected):
        client.create_user({}, "admin-token")


def test_update_and_reset_expect_no_content(client, session):
    session.request.return_value = _response(204)
    client.update_user("admin-token", "u1", {"firstName": "A"})
    client.reset_password("admin-token", "u1", "new-pw")

    reset_call = session.request.call_args
    assert reset_call.args == ("PUT", "http://idp/admin/realms/Istio/users/u1/reset-password")
    assert reset_call.kwargs["json"] == {"type": "password", "value": "new-pw", "temporary": False}

    session.request.return_value = _response(400)
    with pytest.raises(ProviderRejected):
        client.update_user("admin-token", "u1", {})


def test_delete_user_failure(client, session):
    session.request.return_value = _response(403)

    with pytest.raises(ProviderDeleteFailed):
        client.delete_user("caller-token", "u1")

    assert session.request.call_args.args == ("DELETE", "http://idp/admin/realms/Istio/users/u1")


def test_get_user_uses_userinfo(client, session):
    session.request.return_value = _response(200, {"sub": "u1", "email_verified": True})

    assert client.get_user("user-token")["sub"] == "u1"
    assert session.request.call_args.args[1] == "http://idp/realms/Istio/protocol/openid-connect/userinfo"


def test_undecodable_payload(client, session):
    response = _response(200)
    response.json.side_effect = ValueError("not json")
    session.request.return_value = response

    with pytest.raises(ProviderRejected):
        client.get_user_by_id("admin-token", "u1")
