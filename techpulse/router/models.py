# router/models.py
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class CallConfig:
    """
    Parámetros de una llamada concreta. No se persisten.
    `model` es el modelo preferido: si está habilitado se intenta primero.
    """
    model:         Optional[str] = None
    system_prompt: Optional[str] = None
    max_tokens:    int           = 4096
    temperature:   float         = 0.7
    top_p:         float         = 0.9


@dataclass
class CallResult:
    success: bool
    content: Optional[str] = None
    model:   Optional[str] = None
    error:   Optional[str] = None


@dataclass
class ModelEntry:
    """
    Estado runtime de un modelo configurado.
    Se crea al construir el dispatcher y nunca se borra, solo se resetea.
    """
    model:           str
    success_count:   int                = 0
    error_count:     int                = 0
    last_error:      Optional[str]      = None
    last_error_time: Optional[datetime] = None
    disabled:        bool               = False

    @property
    def attempts(self) -> int:
        return self.success_count + self.error_count

    def reset(self) -> None:
        self.success_count   = 0
        self.error_count     = 0
        self.last_error      = None
        self.last_error_time = None
        self.disabled        = False


@dataclass
class ModelConfig:
    """
    Configuración de un backend de generación.
    Se carga desde ~/.techpulse/config.yaml.
    """
    name:            str                # id del modelo, ej: "gemini-2.5-flash"
    provider:        str = "gemini"     # "gemini" | "qwen"
    priority:        int = 99
    api_key:         Optional[str] = None
    timeout_seconds: int = 60
    base_url:        Optional[str] = None   # solo qwen


@dataclass
class DispatchDefaults:
    """Valores por defecto con los que se siembra cada CallConfig."""
    max_tokens:  int   = 4096
    temperature: float = 0.7
    top_p:       float = 0.9

    def to_call_config(self, **overrides) -> CallConfig:
        values = {
            "max_tokens":  self.max_tokens,
            "temperature": self.temperature,
            "top_p":       self.top_p,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return CallConfig(**values)

