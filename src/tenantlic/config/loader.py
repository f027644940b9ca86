# src/tenantlic/config/loader.py
import json, os, pathlib

DEFAULT_SETTINGS_PATH = "config/appsettings.json"

# env var -> key in the "auth" section
_AUTH_ENV = {
    "TENANTLIC_TENANT_ID": "tenant_id",
    "TENANTLIC_CLIENT_ID": "client_id",
    "TENANTLIC_CLIENT_SECRET": "client_secret",
    "TENANTLIC_ACCESS_TOKEN": "access_token",
}


def settings_path() -> pathlib.Path:
    return pathlib.Path(os.environ.get("TENANTLIC_SETTINGS") or DEFAULT_SETTINGS_PATH)


def load_appsettings() -> dict:
    p = settings_path()
    if not p.exists():
        return {}
    try:
        text = p.read_text(encoding="utf-8").strip()
        if not text:
            return {}
        data = json.loads(text)
    except (OSError, ValueError):
        # unreadable or malformed JSON → fall back to defaults
        return {}
    return data if isinstance(data, dict) else {}


def get_http_config() -> dict:
    cfg = load_appsettings().get("http", {})
    return {
        "timeout_seconds": int(cfg.get("timeout_seconds", 30)),
        "max_retries": int(cfg.get("max_retries", 4)),
    }


def get_auth_config() -> dict:
    """
    Credentials from the "auth" section, overridden by TENANTLIC_* env vars.
    Missing values come back as empty strings.
    """
    cfg = load_appsettings().get("auth", {})
    out = {key: str(cfg.get(key) or "") for key in _AUTH_ENV.values()}
    for env, key in _AUTH_ENV.items():
        val = os.environ.get(env)
        if val:
            out[key] = val
    return out


def get_catalog_config() -> dict:
    cfg = load_appsettings().get("catalog", {})
    return {
        "snapshot_path": cfg.get("snapshot_path") or None,
    }
