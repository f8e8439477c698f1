import pytest

from techpulse.router import config_loader
from techpulse.router.config_loader import load_dispatch_defaults, load_model_configs


@pytest.fixture
def config_file(tmp_path):
    f = tmp_path / "config.yaml"
    f.write_text(
        "defaults:\n"
        "  max_tokens: 2000\n"
        "  temperature: 0.5\n"
        "models:\n"
        "  - name: qwen-plus\n"
        "    provider: qwen\n"
        "    priority: 3\n"
        "    api_key: ${TEST_QWEN_KEY}\n"
        "    base_url: https://example.test/v1\n"
        "  - name: gemini-2.5-flash\n"
        "    priority: 1\n"
        "    api_key: literal-key\n"
        "  - name: gemini-1.5-flash\n"
        "    priority: 2\n"
        "    timeout_seconds: 30\n",
        encoding="utf-8",
    )
    return f


@pytest.fixture(autouse=True)
def sin_config_global(monkeypatch, tmp_path):
    """Aísla los tests de la config real del usuario."""
    monkeypatch.delenv("TECHPULSE_CONFIG_PATH", raising=False)
    monkeypatch.setattr(config_loader, "_DEFAULT_CONFIG_PATH", tmp_path / "no_existe.yaml")


class TestLoadModelConfigs:

    def test_ordena_por_prioridad(self, config_file):
        configs = load_model_configs(str(config_file))
        assert [c.name for c in configs] == [
            "gemini-2.5-flash", "gemini-1.5-flash", "qwen-plus",
        ]

    def test_resuelve_variables_de_entorno(self, config_file, monkeypatch):
        monkeypatch.setenv("TEST_QWEN_KEY", "sk-qwen")
        qwen = load_model_configs(str(config_file))[-1]

        assert qwen.api_key == "sk-qwen"
        assert qwen.provider == "qwen"
        assert qwen.base_url == "https://example.test/v1"

    def test_variable_inexistente_es_none(self, config_file, monkeypatch):
        monkeypatch.delenv("TEST_QWEN_KEY", raising=False)
        assert load_model_configs(str(config_file))[-1].api_key is None

    def test_defaults_de_entrada(self, config_file):
        flash = load_model_configs(str(config_file))[1]

        assert flash.provider == "gemini"
        assert flash.timeout_seconds == 30
        assert flash.api_key is None

    def test_ruta_explicita_inexistente_lanza(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_model_configs(str(tmp_path / "falta.yaml"))

    def test_variable_de_entorno_con_ruta_inexistente_lanza(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TECHPULSE_CONFIG_PATH", str(tmp_path / "falta.yaml"))
        with pytest.raises(FileNotFoundError):
            load_model_configs()

    def test_ruta_por_env(self, config_file, monkeypatch):
        monkeypatch.setenv("TECHPULSE_CONFIG_PATH", str(config_file))
        assert len(load_model_configs()) == 3

    def test_sin_config_usa_modelos_incorporados(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "g-key")

        configs = load_model_configs()

        assert [c.name for c in configs] == [
            "gemini-2.5-flash", "gemini-1.5-flash", "gemini-1.5-pro-exp-0514",
        ]
        assert all(c.api_key == "g-key" for c in configs)

    def test_incorporados_usan_api_key_alternativa(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("API_KEY", "alt-key")

        assert load_model_configs()[0].api_key == "alt-key"


class TestLoadDispatchDefaults:

    def test_lee_seccion_defaults(self, config_file):
        defaults = load_dispatch_defaults(str(config_file))

        assert defaults.max_tokens == 2000
        assert defaults.temperature == 0.5
        assert defaults.top_p == 0.9   # no está en el YAML

    def test_sin_config_valores_de_fabrica(self):
        defaults = load_dispatch_defaults()

        assert (defaults.max_tokens, defaults.temperature, defaults.top_p) == (4096, 0.7, 0.9)

    def test_to_call_config_ignora_overrides_none(self, config_file):
        config = load_dispatch_defaults(str(config_file)).to_call_config(
            model="gemini-2.5-flash", temperature=None,
        )

        assert config.model == "gemini-2.5-flash"
        assert config.temperature == 0.5
        assert config.system_prompt is None
