from __future__ import annotations

from typing import Dict, List, Optional

import pytest

from xtenant.core.models import SignInEvent
from xtenant.core.session import SessionContext

LOCAL = "11111111-1111-1111-1111-111111111111"
TENANT_A = "aaaaaaaa-0000-0000-0000-000000000000"
TENANT_B = "bbbbbbbb-0000-0000-0000-000000000000"
TENANT_C = "cccccccc-0000-0000-0000-000000000000"


def make_event(
    *,
    id: str = "evt",
    home: str = LOCAL,
    resource: str = TENANT_A,
    user: str = "user-1",
    resource_id: str = "res-1",
    code: int = 0,
    issuer: str = "AzureAD",
    access_type: str = "b2bCollaboration",
) -> SignInEvent:
    return SignInEvent(
        id=id,
        created_date_time="2026-10-01T08:00:00Z",
        home_tenant_id=home,
        resource_tenant_id=resource,
        user_id=user,
        user_display_name=f"User {user}",
        user_principal_name=f"{user}@contoso.com",
        user_type="member" if home == LOCAL else "guest",
        cross_tenant_access_type=access_type,
        app_id="app-1",
        app_display_name="Office 365 Exchange Online",
        resource_id=resource_id,
        resource_display_name="Exchange",
        status_error_code=code,
        status_failure_reason="" if code == 0 else "Invalid password",
        token_issuer_type=issuer,
    )


def outbound(tenant: str, **kw) -> SignInEvent:
    return make_event(home=LOCAL, resource=tenant, **kw)


def inbound(tenant: str, **kw) -> SignInEvent:
    return make_event(home=tenant, resource=LOCAL, **kw)


class FakeSignInSource:
    """
    Answers only the exact filters it was primed with, and records every
    filter it was asked for.
    """
    def __init__(self, responses: Optional[Dict[str, List[SignInEvent]]] = None):
        self.responses = dict(responses or {})
        self.calls: List[str] = []

    def query_events(self, filter_predicate: str, *, deadline=None, cancel=None) -> List[SignInEvent]:
        self.calls.append(filter_predicate)
        return list(self.responses.get(filter_predicate, []))


OUT_ALL = f"resourceTenantId ne '{LOCAL}'"
IN_ALL = f"homeTenantId ne '{LOCAL}' and tokenIssuerType eq 'AzureAD'"


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("XTENANT_APPSETTINGS", str(tmp_path / "missing.json"))


@pytest.fixture
def source() -> FakeSignInSource:
    return FakeSignInSource()


@pytest.fixture
def context(source) -> SessionContext:
    return SessionContext(tenant_id=LOCAL, api_version="beta", source=source)
