# router/base.py
from abc import ABC, abstractmethod

from techpulse.router.models import CallConfig


class BaseModel(ABC):
    """
    Contrato que deben cumplir todos los adaptadores.
    El ModelDispatcher solo habla con esta interfaz.
    Nunca importa gemini.py ni qwen.py directamente.
    """

    @abstractmethod
    def generate(self, prompt: str, config: CallConfig) -> str:
        """
        Envía el prompt al modelo y devuelve el texto generado.
        Si config.system_prompt existe viaja como parte separada,
        antes del prompt.
        Lanza excepción ante cualquier fallo (red, quota, respuesta
        vacía). El dispatcher la registra y pasa al siguiente modelo.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Id del modelo. Clave de las estadísticas del dispatcher."""
        ...
