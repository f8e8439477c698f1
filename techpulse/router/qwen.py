# router/qwen.py
import logging
from typing import Optional

import httpx

from techpulse.router.base import BaseModel
from techpulse.router.models import CallConfig, ModelConfig

logger = logging.getLogger(__name__)

# Endpoint compatible con OpenAI de DashScope (Alibaba Cloud)
DEFAULT_BASE_URL = "https://dashscope.aliyuncs.com/compatible-mode/v1"

_USER_AGENT = "techpulse-qwen-client/1.0"


class QwenAdapter(BaseModel):

    def __init__(self, config: ModelConfig, client: Optional[httpx.Client] = None):
        self._config = config
        self._client = client or httpx.Client(
            base_url = config.base_url or DEFAULT_BASE_URL,
            timeout  = config.timeout_seconds,
            headers  = {
                "Authorization": f"Bearer {config.api_key}",
                "User-Agent":    _USER_AGENT,
            },
        )

    @property
    def name(self) -> str:
        return self._config.name   # "qwen-plus", "qwen-turbo", ...

    def generate(self, prompt: str, config: CallConfig) -> str:
        messages = []
        if config.system_prompt:
            messages.append({"role": "system", "content": config.system_prompt})
        messages.append({"role": "user", "content": prompt})

        logger.debug("Llamando a Qwen %s", self.name)

        response = self._client.post(
            "/chat/completions",
            json={
                "model":       self.name,
                "messages":    messages,
                "max_tokens":  config.max_tokens,
                "temperature": config.temperature,
                "top_p":       config.top_p,
            },
        )
        # 429 y 5xx salen como HTTPStatusError; el dispatcher decide
        response.raise_for_status()

        choices = response.json().get("choices") or []
        content = (choices[0].get("message") or {}).get("content") if choices else None
        if not content:
            raise ValueError("Empty response from Qwen API")
        if not isinstance(content, str):
            # Algunos endpoints compatibles devuelven una lista de partes
            raise ValueError(f"Unexpected content type from Qwen API: {type(content).__name__}")
        return content

    def close(self) -> None:
        self._client.close()
