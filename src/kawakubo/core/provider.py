"""Image provider clients for the Kawakubo AI Designer.

The generation handler talks to the outside world through a single
capability::

    await provider.generate(prompt, count=1, size=..., quality=..., style=...)

which returns a list of :class:`ProviderImage` or raises
:class:`~kawakubo.core.errors.ProviderFailure`.  :class:`ImageProvider` is the
protocol; :class:`OpenAIImageProvider` is the production implementation
backed by ``openai.AsyncOpenAI``.

Lifecycle
---------
One provider is created by the FastAPI lifespan at startup, stored on
``app.state`` and closed on shutdown.  It holds no per-request state, so
concurrent requests share it freely.

Retries
-------
The OpenAI SDK retries some failures by default.  The client is built with
``max_retries=0``: a transient provider failure is reported to the caller
immediately as a terminal error for that request.

See Also
--------
- :mod:`kawakubo.core.errors` for how failures are classified.
- :mod:`kawakubo.api.handler` for the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import openai

from kawakubo.core.config import KawakuboConfig
from kawakubo.core.errors import ProviderFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderImage:
    """One image returned by the provider.

    Attributes:
        url: Link to the generated image, hosted by the provider.
        revised_prompt: The provider's rewritten prompt, when it reports one.
    """

    url: str
    revised_prompt: str | None = None


class ImageProvider(Protocol):
    """Protocol for text-to-image providers."""

    async def generate(
        self,
        prompt: str,
        *,
        count: int,
        size: str,
        quality: str,
        style: str,
    ) -> list[ProviderImage]:
        """Generate ``count`` images for ``prompt``.

        May raise :class:`~kawakubo.core.errors.ProviderFailure`.
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


class OpenAIImageProvider:
    """Image provider backed by the OpenAI Images API.

    Attributes:
        _client (openai.AsyncOpenAI):
            The SDK client.  Created from configuration unless injected.
        _model (str):
            Image model identifier, e.g. ``"dall-e-3"``.
    """

    def __init__(
        self,
        config: KawakuboConfig,
        client: openai.AsyncOpenAI | None = None,
    ) -> None:
        """Initialise the provider.

        Args:
            config: Application configuration.  Supplies the API key, base
                URL and model name.
            client: Optional pre-built SDK client (used by tests).

        Raises:
            ValueError: If no client is given and no API key is configured.
        """
        self._model = config.image_model

        if client is None:
            if not config.provider_configured:
                raise ValueError("OpenAIImageProvider requires an API key")
            client = openai.AsyncOpenAI(
                api_key=config.openai_api_key.get_secret_value(),
                base_url=config.openai_base_url,
                max_retries=0,
            )
        self._client = client

    @property
    def model(self) -> str:
        """Image model identifier sent with every request."""
        return self._model

    async def generate(
        self,
        prompt: str,
        *,
        count: int,
        size: str,
        quality: str,
        style: str,
    ) -> list[ProviderImage]:
        """Call ``images.generate`` and normalise the result.

        Args:
            prompt: The compiled prompt.
            count: Number of images to request.
            size: Target resolution, e.g. ``"1024x1024"``.
            quality: Quality tier, e.g. ``"hd"``.
            style: Style preference, e.g. ``"natural"``.

        Returns:
            The images in provider order.  Entries without a URL are skipped.

        Raises:
            ProviderFailure: On any SDK error.  ``code`` carries the
                provider's structured error code when one is available.
        """
        try:
            response = await self._client.images.generate(
                model=self._model,
                prompt=prompt,
                n=count,
                size=size,
                quality=quality,
                style=style,
            )
        except openai.RateLimitError as e:
            raise ProviderFailure(e.message, code="rate_limit_exceeded") from e
        except openai.APIError as e:
            raise ProviderFailure(e.message, code=e.code) from e

        images = [
            ProviderImage(url=item.url, revised_prompt=item.revised_prompt)
            for item in (response.data or [])
            if item.url
        ]
        logger.info(f"Provider returned {len(images)} image(s) from {self._model}")
        return images

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()
