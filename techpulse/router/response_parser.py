# router/response_parser.py
import json
import re
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Captura JSON dentro de bloques ```json ... ``` o ``` ... ```
_MARKDOWN_JSON_RE = re.compile(
    r"```(?:json)?\s*([\[{].*?[\]}])\s*```",
    re.DOTALL,
)

# Captura el primer array JSON que aparezca en el texto
_BARE_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)

_CATEGORY_DEFAULT = "综合"


class BriefingParseError(ValueError):
    """La respuesta del modelo no contiene un JSON de noticias utilizable."""


def parse_briefing_response(raw_text: str, model_name: str) -> list[dict]:
    """
    Intenta parsear la respuesta del modelo con degradación progresiva.

    Estrategia:
    1. JSON directo (el camino feliz)
    2. JSON dentro de bloque markdown
    3. Primer array JSON en el texto libre

    Un objeto suelto se trata como lista de un elemento.
    Lanza BriefingParseError si nada funciona: un briefing sin noticias
    no tiene modo de emergencia útil.
    """
    text = (raw_text or "").strip()

    # Intento 1: JSON directo
    result = _try_parse(text)
    if result is not None:
        return _normalize_items(result, model_name)

    # Intento 2: dentro de bloque markdown
    match = _MARKDOWN_JSON_RE.search(text)
    if match:
        result = _try_parse(match.group(1))
        if result is not None:
            logger.warning(
                "%s envolvió la respuesta en markdown, considera reforzar el prompt",
                model_name,
            )
            return _normalize_items(result, model_name)

    # Intento 3: buscar cualquier array JSON en el texto
    match = _BARE_ARRAY_RE.search(text)
    if match:
        result = _try_parse(match.group(0))
        if result is not None:
            logger.warning("%s devolvió JSON con texto extra alrededor", model_name)
            return _normalize_items(result, model_name)

    logger.error("%s devolvió respuesta no parseable", model_name)
    raise BriefingParseError("Invalid JSON response from API")


def _try_parse(text: str) -> Optional[list]:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return data
    return None


def _normalize_items(items: list, model_name: str) -> list[dict]:
    """
    Garantiza headline/summary/category como strings.
    Descarta entradas sin titular: no se pueden mostrar.
    """
    normalized = []
    for item in items:
        if not isinstance(item, dict):
            continue

        headline = str(item.get("headline") or item.get("title") or "").strip()
        if not headline:
            continue

        normalized.append({
            "headline": headline,
            "summary":  str(item.get("summary") or "").strip(),
            "category": str(item.get("category") or _CATEGORY_DEFAULT).strip(),
        })

    dropped = len(items) - len(normalized)
    if dropped:
        logger.warning("%s: %d noticias descartadas por formato inválido", model_name, dropped)

    return normalized
