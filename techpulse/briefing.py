# techpulse/briefing.py
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from techpulse.router.dispatcher import ModelDispatcher
from techpulse.router.models import DispatchDefaults
from techpulse.router.prompt_builder import build_briefing_prompt
from techpulse.router.response_parser import parse_briefing_response

logger = logging.getLogger(__name__)

# Modelo que se intenta primero para el briefing; el resto queda como failover
BRIEFING_MODEL = "gemini-2.5-flash"


class BriefingUnavailableError(Exception):
    """Ningún modelo pudo generar el briefing."""


@dataclass
class Briefing:
    date:  str
    model: str
    items: list[dict] = field(default_factory=list)


class BriefingService:
    """
    Genera el briefing diario de noticias tecnológicas.
    Recibe el dispatcher ya construido. Nunca habla con un adaptador.
    """

    def __init__(
        self,
        dispatcher: ModelDispatcher,
        defaults:   Optional[DispatchDefaults] = None,
        language:   Optional[str]              = None,
    ):
        self._dispatcher = dispatcher
        self._defaults   = defaults or DispatchDefaults()
        self._language   = language

    def generate(self, today: Optional[date] = None) -> Briefing:
        """
        Lanza BriefingUnavailableError si todos los modelos fallan y
        BriefingParseError si la respuesta no es un JSON de noticias.
        """
        today_str, yesterday_str = date_context(today)
        prompt = build_briefing_prompt(today_str, yesterday_str, language=self._language)

        config = self._defaults.to_call_config(model=BRIEFING_MODEL, max_tokens=4096)
        result = self._dispatcher.dispatch(prompt, config)

        if not result.success:
            logger.error("Generación del briefing fallida: %s", result.error)
            raise BriefingUnavailableError(result.error)

        items = parse_briefing_response(result.content, result.model)
        logger.info("Briefing %s generado con %s: %d noticias", today_str, result.model, len(items))

        return Briefing(date=today_str, model=result.model, items=items)


def date_context(today: Optional[date] = None) -> tuple[str, str]:
    """(hoy, ayer) en formato ISO. Por defecto, fecha UTC actual."""
    today = today or datetime.now(timezone.utc).date()
    yesterday = today - timedelta(days=1)
    return today.isoformat(), yesterday.isoformat()
