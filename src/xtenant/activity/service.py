# src/xtenant/activity/service.py
from __future__ import annotations
import time
import warnings
from typing import Optional

from xtenant.activity.aggregator import DirectionResolver, aggregate
from xtenant.activity.grouper import group_events
from xtenant.activity.query_builder import (
    build_queries, check_session, run_queries, validate_external_tenant
)
from xtenant.app import event_bus
from xtenant.config.loader import get_query_config
from xtenant.core.errors import EmptyResultWarning, ValidationError
from xtenant.core.models import ActivityResult, Direction
from xtenant.core.session import SessionContext

# deadline_seconds default: take query.deadline_seconds from appsettings
CONFIG_DEADLINE = object()


def get_cross_tenant_activity(
    context: Optional[SessionContext],
    direction: Direction | str | None = None,
    external_tenant_id: Optional[str] = None,
    summary_stats: bool = False,
    *,
    deadline_seconds: Optional[float] | object = CONFIG_DEADLINE,
    parallel: bool = False,
    direction_resolver: Optional[DirectionResolver] = None,
    logger=None,
) -> ActivityResult:
    """
    Permissions: AuditLog.Read.All
    Cross-tenant sign-ins for the connected tenant, as raw records or as one
    summary row per external tenant (summary_stats=True).

    Raises AuthenticationError / ConfigurationError / ValidationError before
    any query is sent, QueryTimeoutError when the deadline passes. An empty
    result is not an error: EmptyResultWarning is emitted instead.

    deadline_seconds=None runs without a deadline even when one is configured.
    """
    try:
        direction = Direction.parse(direction)
    except ValueError as ex:
        raise ValidationError(str(ex), hint="Use Inbound or Outbound, or omit the direction.") from ex
    external_tenant_id = (external_tenant_id or "").strip() or None

    check_session(context)
    validate_external_tenant(external_tenant_id, context.tenant_id)

    if deadline_seconds is CONFIG_DEADLINE:
        deadline_seconds = get_query_config()["deadline_seconds"]
    deadline = time.monotonic() + deadline_seconds if deadline_seconds is not None else None

    queries = build_queries(direction, context.tenant_id, external_tenant_id)
    for q in queries:
        _log_debug(logger, f"[activity] {q.direction.value} filter: {q.filter}")

    streams = run_queries(context, queries, deadline=deadline, parallel=parallel)
    groups = group_events(streams)
    event_count = sum(len(g) for g in groups)
    _log_debug(logger, f"[activity] {event_count} sign-ins in {len(groups)} tenant group(s)")

    result = ActivityResult(
        rows=aggregate(groups, direction=direction, summary_stats=summary_stats,
                       resolver=direction_resolver),
        summary=summary_stats,
        direction=direction,
        external_tenant_id=external_tenant_id,
        event_count=event_count,
    )

    if result.empty:
        event_bus.publish("activity.empty", {"tenant_id": context.tenant_id})
        warnings.warn("No cross-tenant sign-ins matched the query.", EmptyResultWarning, stacklevel=2)
    else:
        event_bus.publish("activity.ready", {"tenant_id": context.tenant_id, "rows": len(result.rows)})
    return result


def _log_debug(logger, msg: str) -> None:
    if logger:
        logger.debug(msg)
