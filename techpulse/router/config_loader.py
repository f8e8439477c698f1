# router/config_loader.py
import logging
import os
from pathlib import Path
from typing import Optional

import yaml

from techpulse.router.models import DispatchDefaults, ModelConfig

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path.home() / ".techpulse" / "config.yaml"

# Prioridad usada cuando no hay config.yaml: principal → respaldo → último recurso
_BUILTIN_MODELS = (
    "gemini-2.5-flash",
    "gemini-1.5-flash",
    "gemini-1.5-pro-exp-0514",
)


def load_model_configs(config_path: Optional[str] = None) -> list[ModelConfig]:
    """
    Carga la configuración de modelos desde YAML.
    Resuelve variables de entorno en los api_key (${VAR}).
    Devuelve la lista ordenada por prioridad ascendente.
    Sin config.yaml en la ruta por defecto usa la lista de Gemini incorporada.
    """
    raw = _load_raw(config_path)
    if raw is None:
        return _builtin_configs()

    configs = []
    for entry in raw.get("models") or []:
        configs.append(ModelConfig(
            name            = entry["name"],
            provider        = entry.get("provider", "gemini"),
            priority        = entry.get("priority", 99),
            api_key         = _resolve_env(entry.get("api_key")),
            timeout_seconds = entry.get("timeout_seconds", 60),
            base_url        = entry.get("base_url"),
        ))

    return sorted(configs, key=lambda c: c.priority)


def load_dispatch_defaults(config_path: Optional[str] = None) -> DispatchDefaults:
    """Lee la sección `defaults:` del YAML. Ausente → valores de fábrica."""
    raw = _load_raw(config_path) or {}
    section = raw.get("defaults") or {}

    return DispatchDefaults(
        max_tokens  = section.get("max_tokens", 4096),
        temperature = section.get("temperature", 0.7),
        top_p       = section.get("top_p", 0.9),
    )


def _load_raw(config_path: Optional[str]) -> Optional[dict]:
    """
    Una ruta explícita (argumento o TECHPULSE_CONFIG_PATH) que no existe
    es un error del usuario. La ruta por defecto puede no existir.
    """
    explicit = config_path or os.environ.get("TECHPULSE_CONFIG_PATH")
    path     = Path(explicit) if explicit else _DEFAULT_CONFIG_PATH

    if not path.exists():
        if explicit:
            raise FileNotFoundError(
                f"Config no encontrada en {path}. "
                f"Copia config.example.yaml a ~/.techpulse/config.yaml"
            )
        logger.debug("Sin config en %s, usando modelos incorporados", path)
        return None

    with path.open(encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _builtin_configs() -> list[ModelConfig]:
    api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
    return [
        ModelConfig(name=name, provider="gemini", priority=i, api_key=api_key)
        for i, name in enumerate(_BUILTIN_MODELS, start=1)
    ]


def _resolve_env(value: Optional[str]) -> Optional[str]:
    """Expande ${VAR_NAME} desde el entorno."""
    if not value or not value.startswith("${"):
        return value
    var_name = value.strip("${}").strip()
    return os.environ.get(var_name)
