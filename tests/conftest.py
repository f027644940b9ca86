"""Shared fixtures: an in-memory stand-in for GraphClient."""

import copy
import logging

import pytest

from tenantlic.http.errors import NotFoundError, ServerError


class FakeGraph:
    """Records writes; users keyed by UPN; failures injected per UPN."""

    def __init__(self, users=None, skus=None):
        self.users = {upn: copy.deepcopy(u) for upn, u in (users or {}).items()}
        self.skus = list(skus or [])
        self.fail_get = {}
        self.fail_assign = {}
        self.assign_calls = []
        self.patch_calls = []

    def _lookup(self, user_id):
        for upn, u in self.users.items():
            if user_id in (upn, u.get("id")):
                return upn, u
        raise NotFoundError(404, f"/v1.0/users/{user_id}", "Resource not found")

    def get_user(self, user_id):
        if user_id in self.fail_get:
            raise self.fail_get[user_id]
        _, u = self._lookup(user_id)
        return copy.deepcopy(u)

    def assign_licenses(self, user_id, add_licenses, remove_sku_ids=None):
        upn, u = self._lookup(user_id)
        if upn in self.fail_assign:
            raise self.fail_assign[upn]
        self.assign_calls.append((upn, list(add_licenses), list(remove_sku_ids or [])))
        current = {a["skuId"]: a for a in u.get("assignedLicenses", [])}
        for lic in add_licenses:
            current[lic["skuId"]] = {"skuId": lic["skuId"], "disabledPlans": list(lic["disabledPlans"])}
        for sku in remove_sku_ids or []:
            current.pop(sku, None)
        u["assignedLicenses"] = list(current.values())
        return {"id": u["id"]}

    def set_usage_location(self, user_id, usage_location):
        upn, u = self._lookup(user_id)
        self.patch_calls.append((upn, usage_location))
        u["usageLocation"] = usage_location
        return {}

    def list_subscribed_skus(self):
        return copy.deepcopy(self.skus)


def make_user(oid, upn, licenses=(), usage_location="US"):
    return {
        "id": oid,
        "userPrincipalName": upn,
        "usageLocation": usage_location,
        "assignedLicenses": [{"skuId": s, "disabledPlans": list(d)} for s, d in licenses],
    }


def make_sku(part, plans):
    return {
        "skuId": f"id-{part}",
        "skuPartNumber": part,
        "servicePlans": [{"servicePlanName": p, "servicePlanId": f"pid-{p}"} for p in plans],
    }


@pytest.fixture
def fake_graph_cls():
    return FakeGraph


@pytest.fixture
def tenant_users():
    return {
        "alice@contoso.com": make_user("u-alice", "alice@contoso.com",
                                       [("E3", {"YAMMER"}), ("EMS", set())]),
        "bob@contoso.com": make_user("u-bob", "bob@contoso.com",
                                     [("E3", {"SWAY", "TEAMS"}), ("VISIO", set())]),
        "carol@contoso.com": make_user("u-carol", "carol@contoso.com"),
        "dave@contoso.com": make_user("u-dave", "dave@contoso.com", usage_location=None),
    }


@pytest.fixture
def server_error():
    return ServerError(503, "/v1.0/users/x", "Service unavailable")


@pytest.fixture(name="make_sku")
def make_sku_fixture():
    return make_sku


@pytest.fixture(autouse=True)
def reset_tenantlic_logging():
    # setup_logging() binds a handler to the sys.stderr of whichever test ran it
    yield
    root = logging.getLogger("tenantlic")
    for h in list(root.handlers):
        root.removeHandler(h)
    root.propagate = True
