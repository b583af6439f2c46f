# src/xtenant/activity/grouper.py
from __future__ import annotations
from typing import Dict, Iterable, List, Tuple

from xtenant.core.models import Direction, ExternalTenantGroup, SignInEvent

def external_tenant_id(event: SignInEvent, direction: Direction) -> str:
    # inbound: the user's home tenant; outbound: the tenant owning the resource
    if direction is Direction.INBOUND:
        return event.home_tenant_id
    return event.resource_tenant_id

def group_events(
    streams: Iterable[Tuple[Direction, Iterable[SignInEvent]]]
) -> List[ExternalTenantGroup]:
    """
    Partition every stream's events by external tenant id. Groups are keyed
    by (stream direction, tenant id), so an inbound and an outbound group for
    the same tenant stay separate. Groups come out in first-seen order.
    """
    groups: Dict[tuple, ExternalTenantGroup] = {}
    for direction, events in streams:
        for ev in events:
            tid = external_tenant_id(ev, direction)
            grp = groups.get((direction, tid))
            if grp is None:
                grp = groups[(direction, tid)] = ExternalTenantGroup(tid, direction)
            grp.events.append(ev)
    return list(groups.values())
