# src/tenantlic/core/license_copier.py
from __future__ import annotations
import logging
from typing import Iterable, List

from tenantlic.core.errors import UserNotFoundError
from tenantlic.core.graph_client import GraphClient
from tenantlic.core.license_merge import assignments_to_map, map_to_assignments, merge_assignments
from tenantlic.core.models import CopyResult, SkuAssignment, UserLicenses
from tenantlic.http.errors import HttpError, NotFoundError

log = logging.getLogger(__name__)


def fetch_user_licenses(graph: GraphClient, user_id: str) -> UserLicenses:
    try:
        return UserLicenses.from_graph(graph.get_user(user_id))
    except NotFoundError as e:
        raise UserNotFoundError(user_id) from e


def copy_user_license(
    graph: GraphClient,
    targets: Iterable[str],
    source: str,
    *,
    copy_usage_location: bool = False,
) -> List[CopyResult]:
    """
    Copy the source user's SKUs (with their disabled plans) onto each target.

    The source is fetched once; failing that is fatal. Targets are processed in
    order and a failure on one is recorded in its CopyResult without stopping
    the others.
    """
    src = fetch_user_licenses(graph, source)
    src_map = assignments_to_map(src.assignments)
    log.info("Source %s has %d SKU(s)", src.upn or source, len(src_map))

    results: List[CopyResult] = []
    for target in targets:
        try:
            results.append(_copy_to_target(graph, src, src_map, target, copy_usage_location))
        except (HttpError, UserNotFoundError) as e:
            log.error("Target %s failed: %s", target, e)
            results.append(CopyResult(target=target, ok=False, error=str(e)))
    return results


def _copy_to_target(graph, src: UserLicenses, src_map, target: str,
                    copy_usage_location: bool) -> CopyResult:
    tgt = fetch_user_licenses(graph, target)
    tgt_map = assignments_to_map(tgt.assignments)
    merged = tuple(map_to_assignments(merge_assignments(src_map, tgt_map)))

    if tgt.id and tgt.id == src.id:
        log.info("Skipping %s: target is the source user", target)
        return CopyResult(target=target, ok=True, assigned=merged)

    # assignLicense is additive; target-only SKUs (possibly group-inherited) are never re-posted
    to_add = [sku for sku in sorted(src_map) if tgt_map.get(sku) != src_map[sku]]
    if not to_add:
        log.info("%s already matches the source", target)
        return CopyResult(target=target, ok=True, assigned=merged)

    if copy_usage_location and not tgt.usage_location and src.usage_location:
        log.info("Setting usageLocation=%s on %s", src.usage_location, target)
        graph.set_usage_location(tgt.id or target, src.usage_location)

    log.debug("Assigning %s to %s", to_add, target)
    graph.assign_licenses(tgt.id or target, [SkuAssignment(sku, src_map[sku]).to_graph() for sku in to_add])
    log.info("Updated %s: %d SKU(s) written, %d held", target, len(to_add), len(merged))
    return CopyResult(target=target, ok=True, assigned=merged)
