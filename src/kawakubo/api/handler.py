"""Generation request handling for ``POST /api/generate-design``.

:class:`GenerationHandler` turns a raw request body into either a
:class:`~kawakubo.api.models.DesignResponse` or a
:class:`~kawakubo.core.errors.GenerationError`.  It runs the same linear
sequence for every request:

1. **Config check**: the provider API key must be configured.  Checked
   before the body is even parsed.
2. **Parse**: the body must be a JSON object matching
   :class:`~kawakubo.api.models.DesignSubmission`.
3. **Validate**: the description must be non-blank; an attached
   reference image must be within the configured size limit.
4. **Build prompt**: :func:`~kawakubo.core.prompt_builder.build_prompt`.
5. **Invoke**: a single awaited provider call with the fixed generation
   options from configuration.  No retries, no timeout of our own.
6. **Respond**: the provider's images, passed through unchanged.

The outcome is all-or-nothing: either every image the provider returned is
in the response, or an error is raised and nothing is returned.

The handler is constructed once at startup with the read-only
configuration and the provider, and holds no state between requests.
"""

from __future__ import annotations

import json
import logging

from kawakubo.api.models import DesignResponse, DesignSubmission, GeneratedDesign
from kawakubo.core.config import KawakuboConfig
from kawakubo.core.errors import (
    DESCRIPTION_REQUIRED,
    INVALID_BODY,
    MISSING_API_KEY,
    PROVIDER_FAILED,
    REFERENCE_IMAGE_TOO_LARGE,
    ErrorKind,
    GenerationError,
    classify_provider_failure,
)
from kawakubo.core.prompt_builder import build_prompt
from kawakubo.core.provider import ImageProvider

logger = logging.getLogger(__name__)

# Number of images requested per submission.
IMAGES_PER_REQUEST = 1


def _decoded_size(reference_image: str) -> int:
    """Estimate the decoded byte size of a reference image.

    ``data:`` URLs carry base64 after the first comma; four base64
    characters encode three bytes.  Anything else is measured as-is.
    """
    if reference_image.startswith("data:") and "," in reference_image:
        payload = reference_image.split(",", 1)[1].strip()
        padding = len(payload) - len(payload.rstrip("="))
        return max(len(payload) * 3 // 4 - padding, 0)
    return len(reference_image.encode("utf-8"))


class GenerationHandler:
    """Validates design submissions and forwards them to the image provider.

    Attributes:
        _config (KawakuboConfig):
            Read-only configuration: credential presence, generation options
            and the reference image size limit.
        _provider (ImageProvider | None):
            The provider client, or ``None`` when no credential is
            configured.
    """

    def __init__(self, config: KawakuboConfig, provider: ImageProvider | None) -> None:
        self._config = config
        self._provider = provider

    @property
    def provider_configured(self) -> bool:
        """Whether generation requests can reach the provider."""
        return self._provider is not None and self._config.provider_configured

    # ------------------------------------------------------------------
    # Input stages.
    # ------------------------------------------------------------------

    def parse(self, body: bytes | str) -> DesignSubmission:
        """Deserialise a request body into a :class:`DesignSubmission`.

        Raises:
            GenerationError: ``INVALID_INPUT`` if the body is not a JSON
                object of the expected shape.
        """
        try:
            data = json.loads(body)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            return DesignSubmission.model_validate(data)
        except (ValueError, RecursionError) as e:
            logger.warning(f"Rejected request body: {e}")
            raise GenerationError(ErrorKind.INVALID_INPUT, INVALID_BODY, detail=str(e)) from e

    def validate(self, submission: DesignSubmission) -> tuple[str, bool]:
        """Validate a parsed submission.

        Returns:
            Tuple of ``(description, has_reference_image)`` where the
            description has been stripped of surrounding whitespace.

        Raises:
            GenerationError: ``INVALID_INPUT`` for a missing or blank
                description, or an oversize reference image.
        """
        description = (submission.description or "").strip()
        if not description:
            logger.warning("Rejected submission without a description")
            raise GenerationError(ErrorKind.INVALID_INPUT, DESCRIPTION_REQUIRED)

        if submission.reference_image is not None:
            size = _decoded_size(submission.reference_image)
            if size > self._config.max_reference_image_bytes:
                logger.warning(f"Rejected reference image of {size} bytes")
                raise GenerationError(
                    ErrorKind.INVALID_INPUT,
                    REFERENCE_IMAGE_TOO_LARGE,
                    detail=f"{size} bytes exceeds {self._config.max_reference_image_bytes}",
                )

        return description, submission.reference_image_present

    def compile(self, body: bytes | str) -> str:
        """Parse, validate and build the prompt without calling the provider.

        Used by the prompt preview endpoint.  Does not require the provider
        credential.

        Raises:
            GenerationError: On invalid input, as for :meth:`handle`.
        """
        description, has_reference_image = self.validate(self.parse(body))
        return build_prompt(description, has_reference_image)

    # ------------------------------------------------------------------
    # Full request.
    # ------------------------------------------------------------------

    async def handle(self, body: bytes | str) -> DesignResponse:
        """Run a generation request end to end.

        Args:
            body: The raw request body.

        Returns:
            The generated designs.

        Raises:
            GenerationError: For every terminal failure.  The caller turns
                it into an ``{"error": ...}`` response with
                :attr:`GenerationError.status_code`.
        """
        if not self.provider_configured:
            logger.error("Provider API key is missing from the configuration")
            raise GenerationError(ErrorKind.CONFIGURATION_MISSING, MISSING_API_KEY)

        description, has_reference_image = self.validate(self.parse(body))

        prompt = build_prompt(description, has_reference_image)
        logger.info(f"Sending prompt to provider (reference image: {has_reference_image})")
        logger.debug(f"Prompt: {prompt}")

        try:
            images = await self._provider.generate(
                prompt,
                count=IMAGES_PER_REQUEST,
                size=self._config.image_size,
                quality=self._config.image_quality,
                style=self._config.image_style,
            )
        except Exception as e:
            error = classify_provider_failure(e)
            logger.error(f"Provider call failed ({error.kind.value}): {e}", exc_info=True)
            raise error from e

        if not images:
            logger.error("Provider call succeeded but returned no images")
            raise GenerationError(
                ErrorKind.PROVIDER_ERROR,
                PROVIDER_FAILED,
                detail="no images generated",
            )

        return DesignResponse(
            designs=[
                GeneratedDesign(url=image.url, revised_prompt=image.revised_prompt)
                for image in images
            ]
        )
