"""Core functionality for clothing design generation.

- **KawakuboConfig** / **config**: Configuration management using Pydantic
  Settings (``KAWAKUBO_*`` environment variables, plus ``OPENAI_API_KEY``).
- **build_prompt**: Deterministic prompt compilation from a description.
- **OpenAIImageProvider**: Client for the external image provider.
- **GenerationError** / **ErrorKind**: Error taxonomy shared by the API.

Architecture Overview
---------------------
1. **Configuration Layer** (config.py): loaded once at import, read-only.
2. **Prompt Layer** (prompt_builder.py): pure functions, no I/O.
3. **Provider Layer** (provider.py): the only module that performs network
   I/O.
4. **Errors** (errors.py): taxonomy and provider-failure classification.

See Also
--------
- kawakubo.api.handler: Request orchestration built on these components.
"""

from kawakubo.core.config import KawakuboConfig, config
from kawakubo.core.errors import ErrorKind, GenerationError, ProviderFailure
from kawakubo.core.prompt_builder import build_prompt
from kawakubo.core.provider import ImageProvider, OpenAIImageProvider, ProviderImage

__all__ = [
    "ErrorKind",
    "GenerationError",
    "ImageProvider",
    "KawakuboConfig",
    "OpenAIImageProvider",
    "ProviderFailure",
    "ProviderImage",
    "build_prompt",
    "config",
]
