# src/xtenant/core/signin_source.py
from __future__ import annotations
import threading
from typing import List, Optional, Protocol

from xtenant.config.loader import get_query_config
from xtenant.core.errors import AuthenticationError, QueryTimeoutError
from xtenant.core.graph_client import GraphClient
from xtenant.core.models import SignInEvent
from xtenant.http.errors import RequestTimeoutError, UnauthorizedError

class SignInSource(Protocol):
    def query_events(self, filter_predicate: str, *,
                     deadline: Optional[float] = None,
                     cancel: Optional[threading.Event] = None) -> List[SignInEvent]: ...

SELECT_FIELDS = ",".join([
    "id", "createdDateTime", "homeTenantId", "resourceTenantId",
    "userId", "userDisplayName", "userPrincipalName", "userType",
    "crossTenantAccessType", "appId", "appDisplayName",
    "resourceId", "resourceDisplayName", "status", "tokenIssuerType",
])

class GraphSignInSource:
    """
    Permissions: AuditLog.Read.All (application)
    Runs a $filter against auditLogs/signIns and follows every nextLink.
    """
    def __init__(self, graph: GraphClient, *, api_version: str = "beta", page_size: int | None = None):
        self._graph = graph
        self.api_version = api_version
        self.page_size = int(page_size or get_query_config()["page_size"])

    def query_events(self, filter_predicate: str, *,
                     deadline: Optional[float] = None,
                     cancel: Optional[threading.Event] = None) -> List[SignInEvent]:
        url = f"/{self.api_version}/auditLogs/signIns"
        params = {
            "$filter": filter_predicate,
            "$select": SELECT_FIELDS,
            "$top": self.page_size,
        }
        try:
            return [
                SignInEvent.from_graph(item)
                for item in self._graph.get_paged_values(url, params=params,
                                                        deadline=deadline, cancel=cancel)
            ]
        except RequestTimeoutError as ex:
            raise QueryTimeoutError(f"Sign-in query timed out: {filter_predicate}") from ex
        except UnauthorizedError as ex:
            raise AuthenticationError("Graph rejected the session token.",
                                      hint="Reconnect; the access token may have expired.") from ex
