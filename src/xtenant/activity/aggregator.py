# src/xtenant/activity/aggregator.py
from __future__ import annotations
from typing import Callable, Iterable, List, Optional

from xtenant.core.models import (
    Direction, ExternalTenantGroup, SignInRecord, SummaryRow
)

DirectionResolver = Callable[[ExternalTenantGroup], Optional[Direction]]


def first_event_direction(group: ExternalTenantGroup) -> Optional[Direction]:
    """
    Look only at the first event: the key matching its home tenant means
    inbound, matching its resource tenant means outbound. Home wins when
    both match; None when neither does.
    """
    if not group.events:
        return None
    first = group.events[0]
    if group.external_tenant_id == first.home_tenant_id:
        return Direction.INBOUND
    if group.external_tenant_id == first.resource_tenant_id:
        return Direction.OUTBOUND
    return None


def consistent_direction(group: ExternalTenantGroup) -> Optional[Direction]:
    """Like first_event_direction, but every event has to agree."""
    found = None
    for ev in group.events:
        d = first_event_direction(ExternalTenantGroup(group.external_tenant_id, group.direction, [ev]))
        if d is None or (found is not None and d is not found):
            return None
        found = d
    return found


def to_records(groups: Iterable[ExternalTenantGroup]) -> List[SignInRecord]:
    return [
        SignInRecord(
            external_tenant_id=g.external_tenant_id,
            user_display_name=ev.user_display_name,
            user_principal_name=ev.user_principal_name,
            user_id=ev.user_id,
            user_type=ev.user_type,
            cross_tenant_access_type=ev.cross_tenant_access_type,
            app_display_name=ev.app_display_name,
            app_id=ev.app_id,
            resource_display_name=ev.resource_display_name,
            resource_id=ev.resource_id,
            sign_in_id=ev.id,
            created_date_time=ev.created_date_time,
            status_code=ev.status_error_code,
            status_reason=ev.status_failure_reason,
        )
        for g in groups
        for ev in g.events
    ]


def summarize_group(group: ExternalTenantGroup, direction: Optional[Direction]) -> SummaryRow:
    success = sum(1 for ev in group.events if ev.succeeded)
    return SummaryRow(
        external_tenant_id=group.external_tenant_id,
        access_direction=direction,
        sign_ins=len(group.events),
        success_sign_ins=success,
        failed_sign_ins=len(group.events) - success,
        unique_users=len({ev.user_id for ev in group.events}),
        unique_resources=len({ev.resource_id for ev in group.events}),
    )


def summarize(
    groups: Iterable[ExternalTenantGroup],
    direction: Optional[Direction] = None,
    resolver: Optional[DirectionResolver] = None,
) -> List[SummaryRow]:
    """
    One SummaryRow per group. A pinned direction is used as-is; otherwise
    each group's direction comes from `resolver`.

    Rows are ordered by tenant id when direction is unset, and by sign-in
    count (most first) when it is pinned. Both sorts are stable.
    """
    resolve = resolver or first_event_direction
    rows = [
        summarize_group(g, direction if direction is not None else resolve(g))
        for g in groups
    ]
    if direction is None:
        rows.sort(key=lambda r: r.external_tenant_id)
    else:
        rows.sort(key=lambda r: r.sign_ins, reverse=True)
    return rows


def aggregate(
    groups: List[ExternalTenantGroup],
    *,
    direction: Optional[Direction] = None,
    summary_stats: bool = False,
    resolver: Optional[DirectionResolver] = None,
) -> list:
    if summary_stats:
        return summarize(groups, direction, resolver)
    return to_records(groups)
