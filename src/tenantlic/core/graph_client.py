# src/tenantlic/core/graph_client.py
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List
from urllib.parse import quote

from tenantlic.http.client import HttpClient
from tenantlic.config.loader import get_http_config

GRAPH_BASE = "https://graph.microsoft.com"

USER_SELECT = "id,userPrincipalName,displayName,usageLocation,assignedLicenses"
SKU_SELECT = "skuId,skuPartNumber,capabilityStatus,servicePlans"


class GraphClient:
    """
    Tiny Graph wrapper. Token is provided lazily via token_provider().
    """
    def __init__(
        self,
        token_provider: Callable[[], str],
        timeout: float | None = None,
        max_retries: int | None = None,
    ):
        http_cfg = get_http_config()
        to = float(timeout if timeout is not None else http_cfg.get("timeout_seconds", 30))
        mr = int(max_retries if max_retries is not None else http_cfg.get("max_retries", 4))

        self._token_provider = token_provider
        self._http = HttpClient(base_url=GRAPH_BASE, timeout=to, max_retries=mr)

    def _auth_headers(self, extra: Dict[str, str] | None = None) -> Dict[str, str]:
        h = {"Authorization": f"Bearer {self._token_provider()}"}
        if extra:
            h.update(extra)
        return h

    def get_json(self, path_or_url: str, *, params: Dict[str, Any] | None = None) -> dict:
        return self._http.get_json(path_or_url, headers=self._auth_headers(), params=params)

    def get_paged_values(
        self,
        path_or_url: str,
        *,
        params: Dict[str, Any] | None = None
    ) -> Iterable[dict]:
        for page in self._http.get_paged(
            path_or_url, headers=self._auth_headers(), params=params
        ):
            for item in page.get("value", []):
                yield item

    def post_json(self, path_or_url: str, *, json: Any = None) -> dict:
        return self._http.post_json(path_or_url, headers=self._auth_headers(), json=json)

    def patch_json(self, path_or_url: str, *, json: Any = None) -> dict:
        return self._http.patch_json(path_or_url, headers=self._auth_headers(), json=json)

    # ---------- license endpoints ----------
    def list_subscribed_skus(self) -> List[dict]:
        """
        GET /v1.0/subscribedSkus
        Permissions: Organization.Read.All or Directory.Read.All
        """
        return list(self.get_paged_values("/v1.0/subscribedSkus", params={"$select": SKU_SELECT}))

    def get_user(self, user_id: str) -> dict:
        """user_id may be an object id or a UPN. Raises NotFoundError for unknown users."""
        return self.get_json(f"/v1.0/users/{_user_ref(user_id)}", params={"$select": USER_SELECT})

    def assign_licenses(self, user_id: str, add_licenses: List[dict],
                        remove_sku_ids: List[str] | None = None) -> dict:
        """
        POST /v1.0/users/{id}/assignLicense
        Permissions: User.ReadWrite.All or Directory.ReadWrite.All
        Re-adding an assigned SKU replaces its disabledPlans.
        """
        body = {
            "addLicenses": list(add_licenses),
            "removeLicenses": list(remove_sku_ids or []),
        }
        return self.post_json(f"/v1.0/users/{_user_ref(user_id)}/assignLicense", json=body)

    def set_usage_location(self, user_id: str, usage_location: str) -> dict:
        return self.patch_json(f"/v1.0/users/{_user_ref(user_id)}", json={"usageLocation": usage_location})


def _user_ref(user_id: str) -> str:
    # UPNs may carry '#' (guests) or other reserved characters
    return quote(user_id.strip(), safe="@")
