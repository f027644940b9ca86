"""Tests for appsettings.json + env var configuration."""

import json

import pytest

from tenantlic.config.loader import get_auth_config, get_catalog_config, get_http_config


@pytest.fixture
def settings(tmp_path, monkeypatch):
    path = tmp_path / "appsettings.json"
    monkeypatch.setenv("TENANTLIC_SETTINGS", str(path))
    for var in ("TENANTLIC_TENANT_ID", "TENANTLIC_CLIENT_ID", "TENANTLIC_CLIENT_SECRET", "TENANTLIC_ACCESS_TOKEN"):
        monkeypatch.delenv(var, raising=False)
    return path


def test_defaults_without_file(settings):
    assert get_http_config() == {"timeout_seconds": 30, "max_retries": 4}
    assert get_auth_config() == {"tenant_id": "", "client_id": "", "client_secret": "", "access_token": ""}
    assert get_catalog_config() == {"snapshot_path": None}


def test_malformed_json_falls_back(settings):
    settings.write_text("{not json", encoding="utf-8")
    assert get_http_config()["max_retries"] == 4


def test_file_values_and_env_override(settings, monkeypatch):
    settings.write_text(json.dumps({
        "http": {"timeout_seconds": 5, "max_retries": 1},
        "auth": {"tenant_id": "file-tid", "client_id": "file-cid", "client_secret": "file-secret"},
        "catalog": {"snapshot_path": "/tmp/snap.csv"},
    }), encoding="utf-8")
    monkeypatch.setenv("TENANTLIC_CLIENT_SECRET", "env-secret")

    assert get_http_config() == {"timeout_seconds": 5, "max_retries": 1}
    auth = get_auth_config()
    assert auth["tenant_id"] == "file-tid"
    assert auth["client_secret"] == "env-secret"
    assert get_catalog_config()["snapshot_path"] == "/tmp/snap.csv"
