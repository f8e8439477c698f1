from techpulse.router.dispatcher import ModelDispatcher, is_quota_error, summarize
from techpulse.router.base import BaseModel
from techpulse.router.models import CallConfig, CallResult, DispatchDefaults, ModelConfig, ModelEntry
from techpulse.router.prompt_builder import build_briefing_prompt
from techpulse.router.response_parser import BriefingParseError, parse_briefing_response
from techpulse.router.config_loader import load_dispatch_defaults, load_model_configs

__all__ = [
    "ModelDispatcher",
    "is_quota_error",
    "summarize",
    "BaseModel",
    "CallConfig",
    "CallResult",
    "DispatchDefaults",
    "ModelConfig",
    "ModelEntry",
    "build_briefing_prompt",
    "BriefingParseError",
    "parse_briefing_response",
    "load_dispatch_defaults",
    "load_model_configs",
]
