import json
from datetime import date

import pytest
from unittest.mock import MagicMock

from techpulse.briefing import (
    BRIEFING_MODEL,
    BriefingService,
    BriefingUnavailableError,
    date_context,
)
from techpulse.router.models import CallResult, DispatchDefaults
from techpulse.router.response_parser import BriefingParseError


NEWS = json.dumps([
    {"headline": "Gemini 3 llega", "summary": "Google presenta...", "category": "人工智能"},
    {"headline": "TSMC 2nm", "summary": "Producción en masa.", "category": "芯片技术"},
], ensure_ascii=False)


def make_dispatcher(result: CallResult):
    dispatcher = MagicMock()
    dispatcher.dispatch.return_value = result
    return dispatcher


class TestDateContext:

    def test_hoy_y_ayer(self):
        assert date_context(date(2026, 3, 1)) == ("2026-03-01", "2026-02-28")

    def test_por_defecto_usa_fecha_actual(self):
        today, yesterday = date_context()
        assert date.fromisoformat(today) > date.fromisoformat(yesterday)


class TestBriefingService:

    def test_genera_briefing(self):
        dispatcher = make_dispatcher(
            CallResult(success=True, content=NEWS, model="gemini-2.5-flash")
        )
        service = BriefingService(dispatcher)

        briefing = service.generate(date(2026, 10, 19))

        assert briefing.date == "2026-10-19"
        assert briefing.model == "gemini-2.5-flash"
        assert [i["headline"] for i in briefing.items] == ["Gemini 3 llega", "TSMC 2nm"]

    def test_prompt_y_config_de_la_llamada(self):
        dispatcher = make_dispatcher(CallResult(success=True, content=NEWS, model="m"))
        service = BriefingService(dispatcher, defaults=DispatchDefaults(temperature=0.4))

        service.generate(date(2026, 10, 19))

        prompt, config = dispatcher.dispatch.call_args.args
        assert "2026-10-18" in prompt
        assert config.model == BRIEFING_MODEL
        assert config.max_tokens == 4096
        assert config.temperature == 0.4

    def test_fallo_del_dispatcher_lanza_unavailable(self):
        dispatcher = make_dispatcher(
            CallResult(success=False, error="All models failed. Last error: 429")
        )

        with pytest.raises(BriefingUnavailableError, match="429"):
            BriefingService(dispatcher).generate()

    def test_respuesta_no_parseable_lanza(self):
        dispatcher = make_dispatcher(
            CallResult(success=True, content="no hay noticias", model="m")
        )

        with pytest.raises(BriefingParseError):
            BriefingService(dispatcher).generate()
