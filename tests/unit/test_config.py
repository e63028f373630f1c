"""
Unit tests for settings helpers.
"""

from juristcu.config import Settings


def make_settings(**overrides) -> Settings:
    values = dict(API_KEY="tcu_abc", GEMINI_KEYS="", ANTHROPIC_API_KEY=None, OPENAI_API_KEY=None)
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestGeminiKeys:

    def test_split_and_stripped_in_order(self):
        settings = make_settings(GEMINI_KEYS=" k1, k2 ,,k3 ")
        assert settings.gemini_keys == ["k1", "k2", "k3"]

    def test_empty(self):
        assert make_settings().gemini_keys == []


class TestStartupErrors:

    def test_valid_configuration(self):
        assert make_settings(OPENAI_API_KEY="sk-1").startup_errors() == []

    def test_missing_api_key(self):
        errors = make_settings(API_KEY="", GEMINI_KEYS="k1").startup_errors()
        assert errors == ["API_KEY não configurada"]

    def test_api_key_prefix(self):
        errors = make_settings(API_KEY="abc", GEMINI_KEYS="k1").startup_errors()
        assert errors == ['API_KEY deve começar com "tcu_"']

    def test_no_provider(self):
        settings = make_settings()
        assert settings.has_any_provider is False
        assert len(settings.startup_errors()) == 1
        assert "GEMINI_KEYS" in settings.startup_errors()[0]

    def test_blank_gemini_keys_do_not_count(self):
        assert make_settings(GEMINI_KEYS=" , ").has_any_provider is False
