# src/tenantlic/core/catalog.py
from __future__ import annotations
from typing import Any, Dict, Iterable, List

from tenantlic.core.models import PLAN_DELIMITER, ChangeRecord, ChangeType, SkuCatalogEntry


def normalize_catalog(subscribed_skus: Iterable[Dict[str, Any]]) -> List[SkuCatalogEntry]:
    """
    subscribedSkus items -> entries sorted by part number, plans sorted within.
    Items without a skuPartNumber are dropped.
    """
    entries = []
    for s in subscribed_skus or []:
        part = s.get("skuPartNumber")
        if not part:
            continue
        plans = [p.get("servicePlanName") for p in s.get("servicePlans") or []]
        entries.append(SkuCatalogEntry(part, tuple(p for p in plans if p)))
    return sorted(entries, key=lambda e: e.sku_part_number)


def split_plans(joined: str) -> set[str]:
    return {p for p in (joined or "").split(PLAN_DELIMITER) if p}


def diff_catalog(previous: Iterable[SkuCatalogEntry],
                 current: Iterable[SkuCatalogEntry]) -> List[ChangeRecord]:
    """
    Additions only: new SKUs and new plans on known SKUs.
    SKUs that vanished from the tenant are not reported.
    """
    prev_by_part = {e.sku_part_number: e for e in previous}
    changes: List[ChangeRecord] = []

    for entry in current:
        before = prev_by_part.get(entry.sku_part_number)
        if before is None:
            changes.append(ChangeRecord(ChangeType.NEW_SKU, entry.sku_part_number, entry.service_plans))
            continue
        if before.joined_plans == entry.joined_plans:
            continue
        added = split_plans(entry.joined_plans) - split_plans(before.joined_plans)
        if added:
            changes.append(ChangeRecord(ChangeType.NEW_SERVICE_PLAN, entry.sku_part_number, tuple(sorted(added))))
    return changes
