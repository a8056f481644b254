from __future__ import annotations

import pytest

from pinboard.config import DEFAULT_SIMILAR_TOP_N, MAX_SIMILAR_TOP_N, ApiSettings


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("25", 25),
        ("0", 1),
        ("-5", 1),
        ("500", MAX_SIMILAR_TOP_N),
        ("ten", DEFAULT_SIMILAR_TOP_N),
        ("", DEFAULT_SIMILAR_TOP_N),
    ],
)
def test_similar_top_n_from_env_stays_in_range(monkeypatch, raw, expected):
    monkeypatch.setenv("SIMILAR_TOP_N", raw)
    assert ApiSettings.from_env().similar_top_n == expected


def test_similar_top_n_default(monkeypatch):
    monkeypatch.delenv("SIMILAR_TOP_N", raising=False)
    assert ApiSettings.from_env().similar_top_n == DEFAULT_SIMILAR_TOP_N


def test_cors_origins_split(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
    assert ApiSettings.from_env().cors_origins == ["https://a.example", "https://b.example"]
