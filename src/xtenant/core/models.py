from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Direction(str, Enum):
    INBOUND = "Inbound"
    OUTBOUND = "Outbound"

    @classmethod
    def parse(cls, value: "Direction | str | None") -> Optional["Direction"]:
        """Accept a Direction, a case-insensitive name, or None/empty."""
        if value is None or isinstance(value, Direction):
            return value
        text = str(value).strip().lower()
        if not text:
            return None
        for d in cls:
            if d.value.lower() == text:
                return d
        raise ValueError(f"Unknown access direction: {value!r}")


@dataclass(frozen=True)
class SignInEvent:
    id: str
    created_date_time: str
    home_tenant_id: str
    resource_tenant_id: str
    user_id: str
    user_display_name: str
    user_principal_name: str
    user_type: str
    cross_tenant_access_type: str
    app_id: str
    app_display_name: str
    resource_id: str
    resource_display_name: str
    status_error_code: int = 0
    status_failure_reason: str = ""
    token_issuer_type: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status_error_code == 0

    @classmethod
    def from_graph(cls, s: Dict[str, Any]) -> "SignInEvent":
        status = s.get("status") or {}
        return cls(
            id=s.get("id") or "",
            created_date_time=s.get("createdDateTime") or "",
            home_tenant_id=s.get("homeTenantId") or "",
            resource_tenant_id=s.get("resourceTenantId") or "",
            user_id=s.get("userId") or "",
            user_display_name=s.get("userDisplayName") or "",
            user_principal_name=s.get("userPrincipalName") or "",
            user_type=s.get("userType") or "",
            cross_tenant_access_type=s.get("crossTenantAccessType") or "",
            app_id=s.get("appId") or "",
            app_display_name=s.get("appDisplayName") or "",
            resource_id=s.get("resourceId") or "",
            resource_display_name=s.get("resourceDisplayName") or "",
            status_error_code=int(status.get("errorCode") or 0),
            status_failure_reason=status.get("failureReason") or "",
            token_issuer_type=s.get("tokenIssuerType") or "",
        )


@dataclass
class ExternalTenantGroup:
    """Events from one query stream that share an external tenant id."""
    external_tenant_id: str
    direction: Direction
    events: List[SignInEvent] = field(default_factory=list)

    @property
    def key(self) -> tuple:
        return (self.direction, self.external_tenant_id)

    def __len__(self) -> int:
        return len(self.events)


@dataclass(frozen=True)
class SignInRecord:
    external_tenant_id: str
    user_display_name: str
    user_principal_name: str
    user_id: str
    user_type: str
    cross_tenant_access_type: str
    app_display_name: str
    app_id: str
    resource_display_name: str
    resource_id: str
    sign_in_id: str
    created_date_time: str
    status_code: int
    status_reason: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ExternalTenantId": self.external_tenant_id,
            "UserDisplayName": self.user_display_name,
            "UserPrincipalName": self.user_principal_name,
            "UserId": self.user_id,
            "UserType": self.user_type,
            "CrossTenantAccessType": self.cross_tenant_access_type,
            "AppDisplayName": self.app_display_name,
            "AppId": self.app_id,
            "ResourceDisplayName": self.resource_display_name,
            "ResourceId": self.resource_id,
            "SignInId": self.sign_in_id,
            "CreatedDateTime": self.created_date_time,
            "StatusCode": self.status_code,
            "StatusReason": self.status_reason,
        }


@dataclass(frozen=True)
class SummaryRow:
    external_tenant_id: str
    access_direction: Optional[Direction]
    sign_ins: int
    success_sign_ins: int
    failed_sign_ins: int
    unique_users: int
    unique_resources: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ExternalTenantId": self.external_tenant_id,
            "AccessDirection": self.access_direction.value if self.access_direction else None,
            "SignIns": self.sign_ins,
            "SuccessSignIns": self.success_sign_ins,
            "FailedSignIns": self.failed_sign_ins,
            "UniqueUsers": self.unique_users,
            "UniqueResources": self.unique_resources,
        }


@dataclass
class ActivityResult:
    rows: List[Any]
    summary: bool
    direction: Optional[Direction] = None
    external_tenant_id: Optional[str] = None
    event_count: int = 0

    @property
    def empty(self) -> bool:
        return self.event_count == 0

    def as_dicts(self) -> List[Dict[str, Any]]:
        return [r.as_dict() for r in self.rows]
