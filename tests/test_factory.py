import pytest
from unittest.mock import patch

from techpulse import factory
from techpulse.router.dispatcher import ModelDispatcher


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    monkeypatch.setenv("TEST_GEMINI_KEY", "g-key")
    monkeypatch.delenv("TEST_MISSING_KEY", raising=False)
    f = tmp_path / "config.yaml"
    f.write_text(
        "models:\n"
        "  - name: gemini-2.5-flash\n"
        "    provider: gemini\n"
        "    priority: 1\n"
        "    api_key: ${TEST_GEMINI_KEY}\n"
        "  - name: qwen-plus\n"
        "    provider: qwen\n"
        "    priority: 2\n"
        "    api_key: ${TEST_MISSING_KEY}\n"
        "  - name: claude-x\n"
        "    provider: anthropic\n"
        "    priority: 3\n"
        "    api_key: k\n",
        encoding="utf-8",
    )
    return f


class TestBuildDispatcher:

    def test_omite_modelos_sin_key_o_proveedor(self, config_file):
        with patch("techpulse.router.gemini.genai"):
            dispatcher = factory.build_dispatcher(str(config_file))

        assert isinstance(dispatcher, ModelDispatcher)
        assert dispatcher.model_names == ["gemini-2.5-flash"]

    def test_sin_modelos_utilizables_lanza(self, tmp_path):
        f = tmp_path / "config.yaml"
        f.write_text("models: []\n", encoding="utf-8")

        with pytest.raises(RuntimeError, match="Ningún modelo"):
            factory.build_dispatcher(str(f))

    def test_build_app_comparte_dispatcher(self, config_file):
        with patch("techpulse.router.gemini.genai"):
            app = factory.build_app(str(config_file))

        assert app.state.dispatcher.model_names == ["gemini-2.5-flash"]
        assert app.state.briefing is not None

    def test_has_api_key_false_si_falta_alguna_key(self, config_file):
        with patch("techpulse.router.gemini.genai"):
            app = factory.build_app(str(config_file))

        assert app.state.has_api_key is False

    def test_has_api_key_true_con_todas_las_keys(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_GEMINI_KEY", "g-key")
        f = tmp_path / "config.yaml"
        f.write_text(
            "models:\n"
            "  - name: gemini-2.5-flash\n"
            "    api_key: ${TEST_GEMINI_KEY}\n",
            encoding="utf-8",
        )

        with patch("techpulse.router.gemini.genai"):
            app = factory.build_app(str(f))

        assert app.state.has_api_key is True
