# src/xtenant/core/session.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from xtenant.core.auth import TenantSession
from xtenant.core.graph_client import GraphClient
from xtenant.core.signin_source import GraphSignInSource, SignInSource

@dataclass
class SessionContext:
    """
    What an activity query needs from the connected session: the local
    tenant id, the Graph API version in use, and somewhere to run filters.
    Passed explicitly so tests can swap in a fake source.
    """
    tenant_id: str
    api_version: str
    source: Optional[SignInSource]

    @property
    def connected(self) -> bool:
        return bool(self.tenant_id) and self.source is not None

    @classmethod
    def from_session(cls, session: TenantSession, *, page_size: int | None = None,
                     logger=None) -> "SessionContext":
        graph = GraphClient(lambda: session.token, logger=logger)
        source = GraphSignInSource(graph, api_version=session.api_version, page_size=page_size)
        return cls(tenant_id=session.tenant_id, api_version=session.api_version, source=source)
