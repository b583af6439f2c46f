# src/xtenant/activity/query_builder.py
"""
Builds the auditLogs/signIns $filter predicates for a direction/tenant
combination and runs them against the session's sign-in source.

    Outbound  resourceTenantId eq '<ext>'   | resourceTenantId ne '<local>'
    Inbound   homeTenantId eq '<ext>'       | homeTenantId ne '<local>'
              ... and tokenIssuerType eq 'AzureAD'

With no direction both are issued, outbound first.
"""
from __future__ import annotations
import threading
import time
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import List, Optional, Tuple

from xtenant.app import event_bus, job_runner
from xtenant.config.loader import SUPPORTED_API_VERSIONS
from xtenant.core.errors import (
    AuthenticationError, ConfigurationError, QueryTimeoutError, ValidationError
)
from xtenant.core.models import Direction, SignInEvent

# Inbound sign-ins federated from outside the directory service are excluded
DIRECTORY_ISSUER = "AzureAD"

@dataclass(frozen=True)
class TenantQuery:
    direction: Direction
    filter: str

def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"

def outbound_filter(local_tenant_id: str, external_tenant_id: Optional[str] = None) -> str:
    if external_tenant_id:
        return f"resourceTenantId eq {_quote(external_tenant_id)}"
    return f"resourceTenantId ne {_quote(local_tenant_id)}"

def inbound_filter(local_tenant_id: str, external_tenant_id: Optional[str] = None) -> str:
    if external_tenant_id:
        tenant = f"homeTenantId eq {_quote(external_tenant_id)}"
    else:
        tenant = f"homeTenantId ne {_quote(local_tenant_id)}"
    return f"{tenant} and tokenIssuerType eq {_quote(DIRECTORY_ISSUER)}"

def build_queries(
    direction: Optional[Direction],
    local_tenant_id: str,
    external_tenant_id: Optional[str] = None,
) -> List[TenantQuery]:
    queries: List[TenantQuery] = []
    if direction in (None, Direction.OUTBOUND):
        queries.append(TenantQuery(Direction.OUTBOUND, outbound_filter(local_tenant_id, external_tenant_id)))
    if direction in (None, Direction.INBOUND):
        queries.append(TenantQuery(Direction.INBOUND, inbound_filter(local_tenant_id, external_tenant_id)))
    return queries

def check_session(context) -> None:
    if context is None or not context.connected:
        raise AuthenticationError("No active session with the sign-in log source.")
    version = (context.api_version or "").strip().lower()
    if version not in SUPPORTED_API_VERSIONS:
        raise ConfigurationError(
            f"Graph API version {context.api_version!r} does not expose cross-tenant sign-in fields; "
            f"use one of: {', '.join(SUPPORTED_API_VERSIONS)}."
        )

def validate_external_tenant(external_tenant_id: Optional[str], local_tenant_id: str) -> None:
    if external_tenant_id and external_tenant_id.strip().lower() == local_tenant_id.strip().lower():
        raise ValidationError(
            f"External tenant {external_tenant_id} is the connected tenant.",
            hint="Omit the external tenant or supply a tenant other than the one you are connected to.",
        )

def _run_one(context, query: TenantQuery, deadline: Optional[float],
             cancel: Optional[threading.Event] = None) -> List[SignInEvent]:
    if cancel is not None and cancel.is_set():
        return []
    event_bus.publish("activity.query.started", {"direction": query.direction.value, "filter": query.filter})
    events = context.source.query_events(query.filter, deadline=deadline, cancel=cancel)
    # a sibling query failed; the invocation is already over
    if cancel is not None and cancel.is_set():
        return []
    event_bus.publish("activity.query.done", {"direction": query.direction.value, "count": len(events)})
    return events

def run_queries(
    context,
    queries: List[TenantQuery],
    *,
    deadline: Optional[float] = None,
    parallel: bool = False,
) -> List[Tuple[Direction, List[SignInEvent]]]:
    """
    Returns one (direction, events) stream per query, in query order,
    whether or not the queries ran concurrently.
    """
    if not parallel or len(queries) < 2:
        return [(q.direction, _run_one(context, q, deadline)) for q in queries]

    cancel = threading.Event()
    futures = [(q, job_runner.submit_job(_run_one, context, q, deadline, cancel)) for q in queries]
    streams = []
    try:
        for q, fut in futures:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                streams.append((q.direction, fut.result(timeout=remaining)))
            except FutureTimeout as ex:
                raise QueryTimeoutError(f"Sign-in query timed out: {q.filter}") from ex
    except BaseException:
        # queued queries never start; running ones stop before their next page
        cancel.set()
        for _q, other in futures:
            other.cancel()
        raise
    return streams
