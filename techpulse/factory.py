# techpulse/factory.py
import logging
from typing import Optional

from techpulse.briefing import BriefingService
from techpulse.router.dispatcher import ModelDispatcher
from techpulse.router.gemini import GeminiAdapter
from techpulse.router.qwen import QwenAdapter
from techpulse.router.config_loader import load_dispatch_defaults, load_model_configs

logger = logging.getLogger(__name__)

_ADAPTERS = {
    "gemini": GeminiAdapter,
    "qwen":   QwenAdapter,
}


def build_dispatcher(config_path: Optional[str] = None) -> ModelDispatcher:
    """
    Ensambla el dispatcher con los adaptadores configurados.
    Punto de entrada único para el CLI, la API y los tests de integración.
    """
    return ModelDispatcher(_build_models(config_path))


def build_briefing_service(
    dispatcher:  ModelDispatcher,
    config_path: Optional[str] = None,
) -> BriefingService:
    return BriefingService(dispatcher, defaults=load_dispatch_defaults(config_path))


def build_app(config_path: Optional[str] = None):
    """App FastAPI lista para uvicorn."""
    from techpulse.api import create_app

    dispatcher = build_dispatcher(config_path)
    configs    = load_model_configs(config_path)
    return create_app(
        dispatcher,
        briefing    = build_briefing_service(dispatcher, config_path),
        defaults    = load_dispatch_defaults(config_path),
        has_api_key = all(c.api_key for c in configs),
    )


def _build_models(config_path: Optional[str]) -> list:
    """
    Carga el config y construye los adaptadores disponibles.
    Si un modelo no tiene api_key configurada, lo omite con un warning.
    """
    configs = load_model_configs(config_path)
    models  = []

    for config in configs:
        adapter_class = _ADAPTERS.get(config.provider)
        if not adapter_class:
            logger.warning("%s: proveedor desconocido '%s', omitiendo", config.name, config.provider)
            continue
        if not config.api_key:
            logger.warning("%s: sin api_key, omitiendo", config.name)
            continue
        models.append(adapter_class(config))

    if not models:
        raise RuntimeError(
            "Ningún modelo configurado. "
            "Revisa ~/.techpulse/config.yaml y tus variables de entorno."
        )

    return models
