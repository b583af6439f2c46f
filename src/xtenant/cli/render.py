# src/xtenant/cli/render.py
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

SUMMARY_FIELDS = [
    "ExternalTenantId", "AccessDirection", "SignIns", "SuccessSignIns",
    "FailedSignIns", "UniqueUsers", "UniqueResources",
]
RECORD_FIELDS = [
    "ExternalTenantId", "UserPrincipalName", "UserType", "CrossTenantAccessType",
    "AppDisplayName", "ResourceDisplayName", "CreatedDateTime", "StatusCode",
]

def _fmt_val(v: Any) -> str:
    if v is None or v == "":
        return "-"
    if isinstance(v, (list, tuple)):
        return ", ".join(map(str, v))
    return str(v)

def render_table(rows: List[Dict[str, Any]], wanted_fields: Optional[Iterable[str]] = None) -> List[str]:
    """
    Render rows as aligned text lines, columns in the ORDER of wanted_fields.
    Missing keys show a dash.
    """
    fields = list(wanted_fields or (rows[0].keys() if rows else []))
    if not rows or not fields:
        return ["(No rows)"]
    cells = [[_fmt_val(r.get(f)) for f in fields] for r in rows]
    widths = [max(len(f), *(len(c[i]) for c in cells)) for i, f in enumerate(fields)]
    lines = ["  ".join(f.ljust(w) for f, w in zip(fields, widths)).rstrip(),
             "  ".join("-" * w for w in widths)]
    for c in cells:
        lines.append("  ".join(v.ljust(w) for v, w in zip(c, widths)).rstrip())
    return lines

def render_result(result) -> List[str]:
    fields = SUMMARY_FIELDS if result.summary else RECORD_FIELDS
    return render_table(result.as_dicts(), fields)
