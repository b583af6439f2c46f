from __future__ import annotations
from dataclasses import dataclass

from xtenant.config.loader import get_graph_config
from xtenant.http.errors import HttpError, UnauthorizedError
# Error classes live in core.errors; re-exported for callers of connect()
from xtenant.core.errors import (
    AuthenticationError, InvalidTenantId, InvalidClientId, InvalidClientSecret,
    AuthNetworkError, ConsentRequired
)

@dataclass
class TenantSession:
    tenant_id: str
    display_name: str
    domain_hint: str
    token: str
    api_version: str = "beta"

def connect(creds: dict, *, api_version: str | None = None, logger=None) -> TenantSession:
    tenant_id = (creds.get("tenant_id") or "").strip()
    client_id = (creds.get("client_id") or "").strip()
    client_secret = (creds.get("client_secret") or "").strip()

    if not tenant_id: raise InvalidTenantId("Tenant ID required.")
    if not client_id: raise InvalidClientId("Client ID required.")
    if not client_secret: raise InvalidClientSecret("Client Secret required.")

    # helpers do the heavy lifting
    from xtenant.core.auth_helpers import (
        build_authority, msal_acquire_token, graph_get_org
    )

    version = (api_version or get_graph_config()["api_version"]).strip().lower()
    authority = build_authority(tenant_id)
    if logger:
        logger.debug(f"[AUTH] Tenant={tenant_id}, Client={client_id[:6]}..., acquiring app token")
    token = msal_acquire_token(client_id, client_secret, authority)
    try:
        org = graph_get_org(token, logger=logger)
        display, domain = org.display_name, org.domain_hint
        # the token's tenant is authoritative (creds may carry a domain name)
        tenant_id = org.tenant_id or tenant_id
    except UnauthorizedError as ex:
        raise AuthenticationError("Graph rejected the new access token.") from ex
    except HttpError as ex:
        # org lookup is best effort (403 without Organization.Read.All, network trouble)
        if logger:
            logger.debug(f"[AUTH] organization lookup failed: {ex}")
        display, domain = "Unknown Tenant", ""

    return TenantSession(
        tenant_id=tenant_id,
        display_name=display,
        domain_hint=domain,
        token=token,
        api_version=version,
    )
