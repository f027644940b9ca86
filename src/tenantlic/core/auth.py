# src/tenantlic/core/auth.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

log = logging.getLogger(__name__)


class AuthError(Exception):
    code = "auth_error"; hint = "Unknown error."
    def __init__(self, message: str = "", *, hint: str | None = None):
        super().__init__(message or self.__class__.__name__)
        if hint: self.hint = hint

class MissingCredentials(AuthError):
    code = "missing_credentials"
    hint = ("Supply an access token (TENANTLIC_ACCESS_TOKEN) or tenant_id, client_id "
            "and client_secret (appsettings.json auth section or TENANTLIC_* env vars).")
class InvalidTenantId(AuthError):
    code = "invalid_tenant_id"; hint = "Tenant ID invalid or unreachable."
class InvalidClientId(AuthError):
    code = "invalid_client_id"; hint = "Client ID invalid."
class InvalidClientSecret(AuthError):
    code = "invalid_client_secret"; hint = "Client Secret rejected."
class InvalidAccessToken(AuthError):
    code = "invalid_access_token"; hint = "Access token expired or rejected by Graph."
class NetworkError(AuthError):
    code = "network_error"; hint = "Network or timeout issue."
class ConsentRequired(AuthError):
    code = "consent_required"; hint = "Admin consent required for Graph permissions."


@dataclass
class TenantSession:
    tenant_id: str
    display_name: str
    domain_hint: str
    token: str


def connect(creds: Optional[Mapping[str, str]] = None, token: Optional[str] = None) -> TenantSession:
    """
    Open a Graph session. An existing bearer token wins over credentials;
    with neither, MissingCredentials is raised (no interactive prompt).
    """
    from tenantlic.core.auth_helpers import (
        build_authority, msal_acquire_token, graph_get_org
    )

    token = (token or "").strip()
    creds = creds or {}

    if token:
        log.info("Using existing access token")
        # Validates the token; a 401/403 raises InvalidAccessToken
        org = graph_get_org(token, strict=True)
        return TenantSession(
            tenant_id=org.tenant_id or (creds.get("tenant_id") or "").strip(),
            display_name=org.display_name,
            domain_hint=org.domain_hint,
            token=token,
        )

    tenant_id = (creds.get("tenant_id") or "").strip()
    client_id = (creds.get("client_id") or "").strip()
    client_secret = (creds.get("client_secret") or "").strip()

    if not (tenant_id or client_id or client_secret):
        raise MissingCredentials("No access token or client credentials supplied.")
    if not tenant_id: raise InvalidTenantId("Tenant ID required.")
    if not client_id: raise InvalidClientId("Client ID required.")
    if not client_secret: raise InvalidClientSecret("Client Secret required.")

    log.info("Tenant=%s, Client=%s..., acquiring app token", tenant_id, client_id[:6])
    authority = build_authority(tenant_id)
    access_token = msal_acquire_token(client_id, client_secret, authority)
    try:
        org = graph_get_org(access_token)
        display, domain = org.display_name, org.domain_hint
    except AuthError as ex:
        log.warning("Organization lookup failed: %s", ex)
        display, domain = "Unknown Tenant", ""

    return TenantSession(
        tenant_id=tenant_id,
        display_name=display,
        domain_hint=domain,
        token=access_token,
    )
