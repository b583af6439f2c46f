from __future__ import annotations
from dataclasses import dataclass
import msal
import requests

from xtenant.core.errors import (
    AuthenticationError, InvalidTenantId, InvalidClientId, InvalidClientSecret,
    AuthNetworkError, ConsentRequired
)
from xtenant.core.graph_client import GraphClient

SCOPES = ["https://graph.microsoft.com/.default"]

def build_authority(tenant_id: str) -> str:
    return f"https://login.microsoftonline.com/{tenant_id}"

def _map_msal_error(desc: str) -> AuthenticationError:
    d = desc or ""
    if "AADSTS7000215" in d:  # invalid client secret
        return InvalidClientSecret("Invalid client secret.")
    if "AADSTS700016" in d:  # invalid client id
        return InvalidClientId("Invalid client ID or app not found.")
    if "invalid_tenant" in d or "AADSTS90002" in d:
        return InvalidTenantId("Invalid tenant ID or tenant not found.")
    if "AADSTS65001" in d or "consent_required" in d:
        return ConsentRequired("Admin consent required.")
    return AuthenticationError(d)

def msal_acquire_token(client_id: str, client_secret: str, authority: str) -> str:
    try:
        app = msal.ConfidentialClientApplication(
            client_id=client_id,
            client_credential=client_secret,
            authority=authority,
        )
        res = app.acquire_token_for_client(scopes=SCOPES)
    except requests.exceptions.RequestException as ex:
        raise AuthNetworkError(str(ex))
    except ValueError as ex:
        # msal validates the authority eagerly
        raise InvalidTenantId(str(ex))

    if "access_token" not in res:
        raise _map_msal_error(res.get("error_description", "Unknown error"))

    return res["access_token"]

@dataclass
class OrgInfo:
    tenant_id: str
    display_name: str
    domain_hint: str

def graph_get_org(token: str, *, logger=None) -> OrgInfo:
    """Raises the http.errors types; connect() decides which are fatal."""
    graph = GraphClient(lambda: token, logger=logger)
    data = graph.get_json("/v1.0/organization", params={"$select": "id,displayName,verifiedDomains"})
    org = (data.get("value") or [{}])[0]
    name = org.get("displayName") or "Unknown Tenant"
    domains = org.get("verifiedDomains") or []
    domain_hint = domains[0]["name"] if domains else ""
    return OrgInfo(tenant_id=org.get("id") or "", display_name=name, domain_hint=domain_hint)
