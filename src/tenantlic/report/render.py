# src/tenantlic/report/render.py
from __future__ import annotations
from typing import Iterable, List

from tenantlic.core.models import ChangeRecord, CopyResult


def _fmt_plans(plans: Iterable[str]) -> str:
    plans = list(plans)
    return ", ".join(plans) if plans else "(no service plans)"


def render_copy_results(results: Iterable[CopyResult]) -> List[str]:
    """
    Produces lines like:
      OK   bob@contoso.com: 2 SKU(s) assigned
      FAIL carol@contoso.com: User 'carol@contoso.com' not found.
    """
    lines: List[str] = []
    for r in results or []:
        if r.ok:
            lines.append(f"OK   {r.target}: {len(r.assigned)} SKU(s) assigned")
        else:
            lines.append(f"FAIL {r.target}: {r.error or 'unknown error'}")
    return lines or ["(No targets processed)"]


def render_changes(changes: Iterable[ChangeRecord]) -> List[str]:
    lines = [
        f"[{c.change_type.value}] {c.sku_part_number}: {_fmt_plans(c.new_service_plans)}"
        for c in changes or []
    ]
    return lines or ["(No catalog changes)"]
