# src/tenantlic/core/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple

PLAN_DELIMITER = ";"


@dataclass(frozen=True)
class SkuAssignment:
    sku_id: str
    disabled_plans: FrozenSet[str] = frozenset()

    @classmethod
    def from_graph(cls, item: dict) -> "SkuAssignment":
        # assignedLicenses item: {"skuId": "...", "disabledPlans": ["...", ...]}
        return cls(
            sku_id=str(item.get("skuId") or ""),
            disabled_plans=frozenset(item.get("disabledPlans") or []),
        )

    def to_graph(self) -> dict:
        return {"skuId": self.sku_id, "disabledPlans": sorted(self.disabled_plans)}


@dataclass(frozen=True)
class SkuCatalogEntry:
    sku_part_number: str
    service_plans: Tuple[str, ...] = ()

    def __post_init__(self):
        # canonical form: a set of plan names, sorted ascending
        object.__setattr__(self, "service_plans", tuple(sorted({p for p in self.service_plans if p})))

    @property
    def joined_plans(self) -> str:
        return PLAN_DELIMITER.join(self.service_plans)

    @property
    def plan_count(self) -> int:
        return len(self.service_plans)


class ChangeType(str, Enum):
    NEW_SKU = "NewSku"
    NEW_SERVICE_PLAN = "NewServicePlan"


@dataclass(frozen=True)
class ChangeRecord:
    change_type: ChangeType
    sku_part_number: str
    new_service_plans: Tuple[str, ...]


@dataclass
class UserLicenses:
    id: str
    upn: str
    usage_location: Optional[str] = None
    assignments: Tuple[SkuAssignment, ...] = ()

    @classmethod
    def from_graph(cls, user: dict) -> "UserLicenses":
        return cls(
            id=user.get("id", ""),
            upn=user.get("userPrincipalName", ""),
            usage_location=user.get("usageLocation") or None,
            assignments=tuple(SkuAssignment.from_graph(a) for a in user.get("assignedLicenses") or []),
        )


@dataclass
class CopyResult:
    target: str
    ok: bool
    error: Optional[str] = None
    assigned: Tuple[SkuAssignment, ...] = field(default_factory=tuple)
