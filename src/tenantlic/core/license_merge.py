# src/tenantlic/core/license_merge.py
from __future__ import annotations
from typing import Dict, FrozenSet, Iterable, List, Mapping

from tenantlic.core.models import SkuAssignment

AssignmentMap = Mapping[str, FrozenSet[str]]


def assignments_to_map(assignments: Iterable[SkuAssignment]) -> Dict[str, FrozenSet[str]]:
    return {a.sku_id: frozenset(a.disabled_plans) for a in assignments}


def map_to_assignments(mapping: AssignmentMap) -> List[SkuAssignment]:
    return [SkuAssignment(sku_id, frozenset(mapping[sku_id])) for sku_id in sorted(mapping)]


def merge_assignments(source: AssignmentMap, target: AssignmentMap) -> Dict[str, FrozenSet[str]]:
    """
    Additive merge of two SKU -> disabled-plans maps.

    Every source SKU is taken with the source's disabled plans (overwriting the
    target's configuration for it); target SKUs the source lacks are kept
    unchanged. Nothing is ever removed from the target.
    """
    merged: Dict[str, FrozenSet[str]] = {sku: frozenset(plans) for sku, plans in target.items()}
    for sku, plans in source.items():
        merged[sku] = frozenset(plans)
    return merged
