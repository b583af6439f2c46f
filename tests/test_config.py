from __future__ import annotations

import json

from xtenant.config.loader import get_graph_config, get_http_config, get_query_config, load_appsettings


def test_defaults_without_file() -> None:
    assert load_appsettings() == {}
    assert get_http_config() == {"timeout_seconds": 30, "max_retries": 4, "max_concurrency": 6}
    assert get_graph_config() == {"api_version": "beta"}
    assert get_query_config() == {"page_size": 999, "deadline_seconds": None}


def test_reads_file_from_env_path(monkeypatch, tmp_path) -> None:
    p = tmp_path / "appsettings.json"
    p.write_text(json.dumps({
        "graph": {"api_version": "V1.0"},
        "query": {"page_size": 5000, "deadline_seconds": 12},
    }), encoding="utf-8")
    monkeypatch.setenv("XTENANT_APPSETTINGS", str(p))

    assert get_graph_config()["api_version"] == "v1.0"
    assert get_query_config() == {"page_size": 1000, "deadline_seconds": 12.0}


def test_malformed_file_falls_back(monkeypatch, tmp_path) -> None:
    p = tmp_path / "appsettings.json"
    p.write_text("{not json", encoding="utf-8")
    monkeypatch.setenv("XTENANT_APPSETTINGS", str(p))
    assert load_appsettings() == {}
