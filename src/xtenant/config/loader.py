import json, os, pathlib

DEFAULT_PATH = "config/appsettings.json"
SUPPORTED_API_VERSIONS = ("beta",)

def _settings_path() -> pathlib.Path:
    return pathlib.Path(os.environ.get("XTENANT_APPSETTINGS") or DEFAULT_PATH)

def load_appsettings() -> dict:
    p = _settings_path()
    if not p.exists():
        return {}
    try:
        text = p.read_text(encoding="utf-8").strip()
        if not text:
            return {}
        data = json.loads(text)
    except (OSError, ValueError):
        # malformed JSON → fall back to defaults
        return {}
    return data if isinstance(data, dict) else {}

def get_http_config():
    cfg = load_appsettings().get("http", {})
    return {
        "timeout_seconds": int(cfg.get("timeout_seconds", 30)),
        "max_retries": int(cfg.get("max_retries", 4)),
        "max_concurrency": int(cfg.get("max_concurrency", 6)),
    }

def get_graph_config():
    cfg = load_appsettings().get("graph", {})
    return {
        "api_version": str(cfg.get("api_version", "beta")).strip().lower(),
    }

def get_query_config():
    cfg = load_appsettings().get("query", {})
    deadline = cfg.get("deadline_seconds")
    return {
        # signIns accepts at most 1000 per page
        "page_size": max(1, min(int(cfg.get("page_size", 999)), 1000)),
        "deadline_seconds": float(deadline) if deadline is not None else None,
    }
