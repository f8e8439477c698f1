# router/dispatcher.py
import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from techpulse.router.base import BaseModel
from techpulse.router.models import CallConfig, CallResult, ModelEntry

logger = logging.getLogger(__name__)

# Marcadores de throttling de los proveedores (Gemini y DashScope)
_QUOTA_MARKERS = (
    "RESOURCE_EXHAUSTED",
    "429",
    "quota",
    "rate limit",
    "rate_limit",
    "exceeded",
)

_NO_CANDIDATES = "no enabled models"


class ModelDispatcher:
    """
    Decide qué modelo usar en cada llamada y hace failover.
    La aplicación construye una sola instancia al arrancar y la pasa
    a los handlers. Las estadísticas viven aquí, no a nivel de módulo.

    Responsabilidades:
    - Ordenar candidatos: prioridad del config, deshabilitados fuera,
      preferido al frente
    - Probar cada candidato en secuencia hasta el primer éxito
    - Llevar contadores de éxito/error por modelo (best-effort, en memoria)
    """

    def __init__(self, models: list[BaseModel]):
        # La lista ya viene ordenada por prioridad desde el config
        if not models:
            raise ValueError("El dispatcher necesita al menos un modelo")

        names = [m.name for m in models]
        duplicated = sorted({n for n in names if names.count(n) > 1})
        if duplicated:
            raise ValueError(f"Modelos duplicados en la configuración: {duplicated}")

        self._models  = {m.name: m for m in models}
        self._order   = names
        self._entries = {name: ModelEntry(model=name) for name in names}
        # Los handlers sync de la API corren en un thread pool
        self._lock    = threading.Lock()

    # ------------------------------------------------------------------
    # Generación
    # ------------------------------------------------------------------

    def candidate_order(self, preferred: Optional[str] = None) -> list[str]:
        """Orden de intento para una llamada. Sin efectos secundarios."""
        with self._lock:
            order = [name for name in self._order if not self._entries[name].disabled]

        if preferred and preferred in order:
            order.remove(preferred)
            order.insert(0, preferred)
        return order

    def dispatch(self, prompt: str, config: Optional[CallConfig] = None) -> CallResult:
        """
        Intenta generar con el mejor candidato disponible.
        Nunca lanza: cualquier error de un modelo se registra y se pasa
        al siguiente; si todos fallan devuelve CallResult(success=False).
        """
        config = config or CallConfig()

        if not prompt or not prompt.strip():
            return CallResult(success=False, error="Prompt is required")

        last_error = _NO_CANDIDATES

        for model_id in self.candidate_order(config.model):
            try:
                logger.info("Intentando generación con %s", model_id)
                text = self._models[model_id].generate(prompt, config)
                # Un adaptador que devuelve algo que no es texto cuenta como fallo
                if not isinstance(text, str) or not text.strip():
                    raise ValueError("No text content in response")
                text = text.strip()

            except Exception as e:
                last_error = str(e) or type(e).__name__
                self._record_error(model_id, last_error)

                # La clasificación no cambia el flujo: ambos casos hacen failover
                if is_quota_error(last_error):
                    logger.warning(
                        "Quota agotada en %s, pasando al siguiente modelo: %s",
                        model_id, last_error,
                    )
                else:
                    logger.warning(
                        "Modelo %s falló: %s. Pasando al siguiente.",
                        model_id, last_error,
                    )
                continue

            successes = self._record_success(model_id)
            logger.info("Éxito con %s (%d éxitos)", model_id, successes)
            return CallResult(success=True, content=text, model=model_id)

        logger.error(
            "Todos los modelos fallaron. Estadísticas: %s",
            [
                {
                    "model":      s["model"],
                    "successes":  s["success_count"],
                    "errors":     s["error_count"],
                    "last_error": s["last_error"],
                    "disabled":   s["disabled"],
                }
                for s in self.get_stats()
            ],
        )
        return CallResult(
            success=False,
            error=f"All models failed. Last error: {last_error}",
        )

    # ------------------------------------------------------------------
    # Gestión y monitorización
    # ------------------------------------------------------------------

    def get_stats(self) -> list[dict]:
        """Resumen por modelo en orden de prioridad. Solo lectura."""
        with self._lock:
            return [_summarize_entry(self._entries[name]) for name in self._order]

    def disable_model(self, model_id: str) -> bool:
        with self._lock:
            entry = self._entries.get(model_id)
            if entry is None:
                return False
            entry.disabled = True

        logger.info("Modelo %s deshabilitado manualmente", model_id)
        return True

    def enable_model(self, model_id: str) -> bool:
        """Rehabilita el modelo y pone a cero sus errores (no sus éxitos)."""
        with self._lock:
            entry = self._entries.get(model_id)
            if entry is None:
                return False
            entry.disabled    = False
            entry.error_count = 0

        logger.info("Modelo %s habilitado manualmente", model_id)
        return True

    def reset_stats(self) -> None:
        with self._lock:
            for entry in self._entries.values():
                entry.reset()
        logger.info("Estadísticas de modelos reseteadas")

    @property
    def model_names(self) -> list[str]:
        return list(self._order)

    # ------------------------------------------------------------------
    # Contadores internos
    # ------------------------------------------------------------------

    def _record_success(self, model_id: str) -> int:
        with self._lock:
            entry = self._entries[model_id]
            entry.success_count += 1
            entry.error_count    = 0
            return entry.success_count

    def _record_error(self, model_id: str, message: str) -> None:
        with self._lock:
            entry = self._entries[model_id]
            entry.error_count    += 1
            entry.last_error      = message
            entry.last_error_time = datetime.now(timezone.utc)


def is_quota_error(message: str) -> bool:
    """True si el mensaje contiene algún marcador de quota/rate limit."""
    return any(marker in message for marker in _QUOTA_MARKERS)


def summarize(stats: list[dict]) -> dict:
    """
    Resumen agregado para el endpoint de monitorización.
    `stats` es la salida de ModelDispatcher.get_stats().
    """
    total_successes = sum(s["success_count"] for s in stats)
    total_errors    = sum(s["error_count"] for s in stats)
    total_requests  = total_successes + total_errors

    if not any(s["success_count"] > 0 for s in stats):
        action = "All models experiencing issues - check API keys and quotas"
    elif stats[0]["success_rate"] == "100.00%":
        action = "Primary model functioning normally"
    else:
        action = "Using fallback models - primary model has issues"

    return {
        "total_requests":       total_requests,
        "total_successes":      total_successes,
        "total_errors":         total_errors,
        "overall_success_rate": _rate(total_successes, total_requests),
        "recommended_action":   action,
    }


def _summarize_entry(entry: ModelEntry) -> dict:
    return {
        "model":           entry.model,
        "success_count":   entry.success_count,
        "error_count":     entry.error_count,
        "success_rate":    _rate(entry.success_count, entry.attempts),
        "last_error":      entry.last_error,
        "last_error_time": entry.last_error_time.isoformat() if entry.last_error_time else None,
        "disabled":        entry.disabled,
    }


def _rate(successes: int, attempts: int) -> str:
    if attempts <= 0:
        return "N/A"
    return f"{successes / attempts * 100:.2f}%"
