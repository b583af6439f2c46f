from __future__ import annotations

from unittest.mock import Mock

import pytest

from xtenant.core import auth_helpers
from xtenant.core.auth import connect
from xtenant.core.auth_helpers import OrgInfo, build_authority, msal_acquire_token
from xtenant.core.errors import (
    AuthenticationError, ConsentRequired, InvalidClientId,
    InvalidClientSecret, InvalidTenantId,
)
from xtenant.http.errors import NetworkError, ServerError, UnauthorizedError

CREDS = {"tenant_id": "contoso.onmicrosoft.com", "client_id": "client-123456", "client_secret": "s3cret"}


def _msal(monkeypatch, result):
    app = Mock()
    app.acquire_token_for_client.return_value = result
    factory = Mock(return_value=app)
    monkeypatch.setattr(auth_helpers.msal, "ConfidentialClientApplication", factory)
    return factory


@pytest.mark.parametrize("missing,exc", [
    ("tenant_id", InvalidTenantId), ("client_id", InvalidClientId), ("client_secret", InvalidClientSecret),
])
def test_connect_requires_credentials(missing, exc) -> None:
    creds = dict(CREDS, **{missing: "  "})
    with pytest.raises(exc):
        connect(creds)


def test_connect_returns_session_with_org_tenant(monkeypatch) -> None:
    factory = _msal(monkeypatch, {"access_token": "tok"})
    monkeypatch.setattr(auth_helpers, "graph_get_org",
                        lambda token, **kw: OrgInfo("local-guid", "Contoso", "contoso.com"))

    session = connect(CREDS)

    assert session.token == "tok"
    assert session.tenant_id == "local-guid"
    assert session.display_name == "Contoso"
    assert session.api_version == "beta"
    assert factory.call_args.kwargs["authority"] == build_authority(CREDS["tenant_id"])


def test_connect_keeps_going_when_org_lookup_fails(monkeypatch) -> None:
    _msal(monkeypatch, {"access_token": "tok"})

    def _fail(token, **kw):
        raise NetworkError(-1, "https://graph.microsoft.com/v1.0/organization", "down")

    monkeypatch.setattr(auth_helpers, "graph_get_org", _fail)
    session = connect(CREDS, api_version="V1.0")
    assert session.tenant_id == CREDS["tenant_id"]
    assert session.display_name == "Unknown Tenant"
    assert session.api_version == "v1.0"


def test_connect_fails_when_graph_rejects_token(monkeypatch) -> None:
    _msal(monkeypatch, {"access_token": "tok"})

    def _reject(token, **kw):
        raise UnauthorizedError(401, "https://graph.microsoft.com/v1.0/organization")

    monkeypatch.setattr(auth_helpers, "graph_get_org", _reject)
    with pytest.raises(AuthenticationError):
        connect(CREDS)


def test_graph_get_org_goes_through_graph_client(monkeypatch) -> None:
    graph = Mock()
    graph.get_json.return_value = {"value": [{
        "id": "local-guid", "displayName": "Contoso",
        "verifiedDomains": [{"name": "contoso.com"}],
    }]}
    factory = Mock(return_value=graph)
    monkeypatch.setattr(auth_helpers, "GraphClient", factory)

    org = auth_helpers.graph_get_org("tok")

    assert org == OrgInfo("local-guid", "Contoso", "contoso.com")
    assert factory.call_args.args[0]() == "tok"
    graph.get_json.assert_called_once_with(
        "/v1.0/organization", params={"$select": "id,displayName,verifiedDomains"})


def test_graph_get_org_propagates_http_errors(monkeypatch) -> None:
    graph = Mock()
    graph.get_json.side_effect = ServerError(503, "https://graph.microsoft.com/v1.0/organization")
    monkeypatch.setattr(auth_helpers, "GraphClient", Mock(return_value=graph))
    with pytest.raises(ServerError):
        auth_helpers.graph_get_org("tok")


@pytest.mark.parametrize("desc,exc", [
    ("AADSTS7000215: Invalid client secret provided.", InvalidClientSecret),
    ("AADSTS700016: Application not found", InvalidClientId),
    ("AADSTS90002: Tenant not found", InvalidTenantId),
    ("AADSTS65001: consent_required", ConsentRequired),
    ("something else", AuthenticationError),
])
def test_msal_errors_are_mapped(monkeypatch, desc, exc) -> None:
    _msal(monkeypatch, {"error": "invalid_client", "error_description": desc})
    with pytest.raises(exc):
        msal_acquire_token("cid", "secret", build_authority("t"))
