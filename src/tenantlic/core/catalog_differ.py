# src/tenantlic/core/catalog_differ.py
from __future__ import annotations
import logging
import os
from typing import List

from tenantlic.core.catalog import diff_catalog, normalize_catalog
from tenantlic.core.errors import EmptyCatalogError
from tenantlic.core.graph_client import GraphClient
from tenantlic.core.models import ChangeRecord
from tenantlic.core.snapshot_store import read_snapshot, write_snapshot

log = logging.getLogger(__name__)


def diff_license_catalog(graph: GraphClient, snapshot_path: os.PathLike | str) -> List[ChangeRecord]:
    """
    Compare the tenant's SKU catalog with the saved snapshot, then overwrite
    the snapshot with the current catalog (also when nothing changed).
    """
    current = normalize_catalog(graph.list_subscribed_skus())
    if not current:
        raise EmptyCatalogError("Graph returned zero subscribed SKUs.")
    log.info("Fetched %d SKU(s)", len(current))

    previous = read_snapshot(snapshot_path)
    if previous is None:
        log.info("No snapshot at %s; creating it", snapshot_path)
        changes: List[ChangeRecord] = []
    else:
        changes = diff_catalog(previous, current)
        log.info("Compared against %d saved SKU(s): %d change(s)", len(previous), len(changes))

    write_snapshot(snapshot_path, current)
    log.info("Wrote %s", snapshot_path)
    return changes
