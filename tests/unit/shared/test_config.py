"""
Tests for configuration loading.
"""

from socrate.shared.config import SocrateSettings


def test_yaml_values_loaded(tmp_path):
    config_path = tmp_path / "socrate.yaml"
    config_path.write_text(
        "socrate:\n"
        "  gateway:\n"
        "    proxy_url: http://localhost:9000/api/gemini\n"
        "    default_model: gemini-2.0-flash\n"
        "  api:\n"
        "    rate_limit:\n"
        "      requests_per_minute: 5\n"
        "  conversation:\n"
        "    fallback_question: Can you tell me more?\n",
        encoding="utf-8",
    )

    loaded = SocrateSettings.load_from_yaml(config_path)

    assert loaded.gateway.proxy_url == "http://localhost:9000/api/gemini"
    assert loaded.gateway.default_model == "gemini-2.0-flash"
    assert loaded.api.rate_limit_requests_per_minute == 5
    assert loaded.conversation.fallback_question == "Can you tell me more?"


def test_missing_yaml_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("GATEWAY_MODEL", raising=False)
    monkeypatch.delenv("GATEWAY_PROXY_URL", raising=False)

    loaded = SocrateSettings.load_from_yaml(tmp_path / "absent.yaml")

    assert loaded.gateway.default_model == "gemini-1.5-flash"
    assert loaded.gateway.timeout_seconds is None
    assert loaded.diary.copied_flash_seconds == 2.0
