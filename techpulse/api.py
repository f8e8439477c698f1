"""
API HTTP de TechPulse.

Endpoints:
  GET  /api/model-stats       - estadísticas de modelos + resumen
  POST /api/model-stats       - reset | disable | enable
  POST /api/generate          - generación libre con failover
  GET  /api/generate-content  - briefing diario de noticias
  GET  /api/health            - estado del servicio

El dispatcher se construye fuera y vive en app.state: cada app tiene
sus propias estadísticas.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel as Schema

from techpulse.briefing import BriefingService, BriefingUnavailableError
from techpulse.router.dispatcher import ModelDispatcher, summarize
from techpulse.router.models import DispatchDefaults
from techpulse.router.response_parser import BriefingParseError

logger = logging.getLogger(__name__)

_INVALID_ACTION = (
    "Invalid action. Use: reset, disable (with model parameter), "
    "or enable (with model parameter)"
)


class ModelAction(Schema):
    # Sin validación de tipos: cualquier cuerpo inválido cae en el 400 del handler
    action: Any = None
    model:  Any = None


class GenerateRequest(Schema):
    prompt:        str
    model:         Optional[str]   = None
    system_prompt: Optional[str]   = None
    max_tokens:    Optional[int]   = None
    temperature:   Optional[float] = None
    top_p:         Optional[float] = None


def create_app(
    dispatcher:  ModelDispatcher,
    briefing:    Optional[BriefingService]  = None,
    defaults:    Optional[DispatchDefaults] = None,
    has_api_key: bool                       = False,
) -> FastAPI:
    app = FastAPI(title="TechPulse", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins     = ["*"],
        allow_credentials = True,
        allow_methods     = ["GET", "POST", "OPTIONS"],
        allow_headers     = ["*"],
    )

    app.state.dispatcher  = dispatcher
    app.state.briefing    = briefing or BriefingService(dispatcher, defaults)
    app.state.defaults    = defaults or DispatchDefaults()
    # True solo si todos los modelos configurados tienen api_key
    app.state.has_api_key = has_api_key

    # ------------------------------------------------------------------
    # Monitorización de modelos
    # ------------------------------------------------------------------

    @app.get("/api/model-stats")
    def get_model_stats(request: Request):
        stats = request.app.state.dispatcher.get_stats()
        for s in stats:
            logger.info(
                "%s: rate=%s ok=%d err=%d %s",
                s["model"], s["success_rate"], s["success_count"], s["error_count"],
                "DISABLED" if s["disabled"] else "ACTIVE",
            )
        return {
            "success":   True,
            "timestamp": _now(),
            "models":    stats,
            "summary":   summarize(stats),
        }

    @app.post("/api/model-stats")
    def post_model_stats(body: ModelAction, request: Request):
        dispatcher = request.app.state.dispatcher

        if body.action == "reset":
            dispatcher.reset_stats()
            return {"success": True, "message": "Model statistics have been reset"}

        if body.action == "disable" and isinstance(body.model, str) and body.model:
            dispatcher.disable_model(body.model)
            return {
                "success": True,
                "message": f"Model {body.model} has been disabled",
                "models":  dispatcher.get_stats(),
            }

        if body.action == "enable" and isinstance(body.model, str) and body.model:
            dispatcher.enable_model(body.model)
            return {
                "success": True,
                "message": f"Model {body.model} has been enabled",
                "models":  dispatcher.get_stats(),
            }

        return JSONResponse(status_code=400, content={"error": _INVALID_ACTION})

    # ------------------------------------------------------------------
    # Generación
    # ------------------------------------------------------------------

    @app.post("/api/generate")
    def generate(body: GenerateRequest, request: Request):
        state  = request.app.state
        config = state.defaults.to_call_config(
            model         = body.model,
            system_prompt = body.system_prompt,
            max_tokens    = body.max_tokens,
            temperature   = body.temperature,
            top_p         = body.top_p,
        )
        result = state.dispatcher.dispatch(body.prompt, config)

        if not result.success:
            return JSONResponse(status_code=500, content={
                "success":     False,
                "error":       result.error,
                "model_stats": state.dispatcher.get_stats(),
            })

        return {"success": True, "content": result.content, "model": result.model}

    @app.get("/api/generate-content")
    def generate_content(request: Request):
        state = request.app.state
        try:
            briefing = state.briefing.generate()
        except BriefingUnavailableError as e:
            return JSONResponse(status_code=500, content={
                "success":     False,
                "error":       str(e),
                "model_stats": state.dispatcher.get_stats(),
            })
        except BriefingParseError as e:
            return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

        return {
            "success": True,
            "date":    briefing.date,
            "model":   briefing.model,
            "data":    briefing.items,
        }

    # ------------------------------------------------------------------
    # Salud
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health(request: Request):
        dispatcher = request.app.state.dispatcher
        return {
            "status":      "ok",
            "timestamp":   _now(),
            "has_api_key": request.app.state.has_api_key,
            "models":      dispatcher.candidate_order(),
        }

    return app


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
