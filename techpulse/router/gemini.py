# router/gemini.py
import logging

import google.generativeai as genai

from techpulse.router.base import BaseModel
from techpulse.router.models import CallConfig, ModelConfig

logger = logging.getLogger(__name__)


class GeminiAdapter(BaseModel):

    def __init__(self, config: ModelConfig):
        self._config = config
        genai.configure(api_key=config.api_key)
        self._model = genai.GenerativeModel(model_name=config.name)

    @property
    def name(self) -> str:
        return self._config.name   # "gemini-2.5-flash", "gemini-1.5-flash", ...

    def generate(self, prompt: str, config: CallConfig) -> str:
        parts = [prompt]
        if config.system_prompt:
            parts.insert(0, config.system_prompt)

        logger.debug("Llamando a Gemini %s (%d partes)", self.name, len(parts))

        response = self._model.generate_content(
            [{"role": "user", "parts": parts}],
            generation_config = genai.GenerationConfig(
                max_output_tokens = config.max_tokens,
                temperature       = config.temperature,
                top_p             = config.top_p,
            ),
            request_options = {"timeout": self._config.timeout_seconds},
        )

        text = _first_text(response)
        if not text:
            raise ValueError("No text content in response")
        return text


def _first_text(response) -> str:
    """
    Primer texto del primer candidato.
    response.text lanza si el candidato fue bloqueado; aquí devolvemos
    vacío y el adaptador lo convierte en error uniforme.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ""
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        text = getattr(part, "text", None)
        if text:
            return text
    return ""
