"""Kawakubo AI Designer - clothing design generation from text descriptions."""

__version__ = "0.1.0"

from kawakubo.core.config import KawakuboConfig, config
from kawakubo.core.prompt_builder import build_prompt

__all__ = [
    "KawakuboConfig",
    "build_prompt",
    "config",
]
