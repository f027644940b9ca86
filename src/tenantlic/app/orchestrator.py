# src/tenantlic/app/orchestrator.py
from __future__ import annotations
import logging
from typing import Iterable, List, Mapping, Optional

from tenantlic.config.loader import get_auth_config, get_catalog_config
from tenantlic.core import catalog_differ, license_copier
from tenantlic.core.auth import TenantSession, connect
from tenantlic.core.graph_client import GraphClient
from tenantlic.core.models import ChangeRecord, CopyResult
from tenantlic.core.snapshot_store import default_snapshot_path

log = logging.getLogger(__name__)


def open_session(credential: Optional[Mapping[str, str]] = None,
                 token: Optional[str] = None) -> TenantSession:
    """
    Explicit credential/token first, then appsettings.json + TENANTLIC_* env.
    """
    if credential is None and not token:
        cfg = get_auth_config()
        token = cfg.get("access_token") or None
        credential = cfg
    session = connect(credential, token=token)
    log.info("Connected to %s [%s] (%s)", session.display_name, session.domain_hint or "no verified domain",
             session.tenant_id or "?")
    return session


def _graph(session: TenantSession) -> GraphClient:
    return GraphClient(lambda: session.token)


def copy_user_license(
    targets: Iterable[str],
    source: str,
    *,
    credential: Optional[Mapping[str, str]] = None,
    token: Optional[str] = None,
    copy_usage_location: bool = False,
) -> List[CopyResult]:
    targets = list(targets)
    if not targets:
        raise ValueError("At least one target user is required.")
    session = open_session(credential, token)
    return license_copier.copy_user_license(
        _graph(session), targets, source, copy_usage_location=copy_usage_location
    )


def diff_license_catalog(
    snapshot_path: Optional[str] = None,
    *,
    credential: Optional[Mapping[str, str]] = None,
    token: Optional[str] = None,
) -> List[ChangeRecord]:
    session = open_session(credential, token)
    path = snapshot_path or get_catalog_config()["snapshot_path"] or default_snapshot_path(session.tenant_id)
    return catalog_differ.diff_license_catalog(_graph(session), path)
