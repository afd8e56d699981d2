"""Pydantic request and response models for the Kawakubo AI Designer API.

These models define the JSON schema for the API endpoints.  The request
body is validated by the generation handler itself rather than by FastAPI,
so that malformed payloads produce the API's own ``{"error": ...}`` shape
instead of FastAPI's default validation response.

Models
------
DesignSubmission
    Payload for ``POST /api/generate-design`` and ``POST /api/prompt/compile``.
GeneratedDesign
    One generated image in a successful response.
DesignResponse
    Successful response of ``POST /api/generate-design``.
PromptPreviewResponse
    Response of ``POST /api/prompt/compile``.
ErrorResponse
    Body of every failed request.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DesignSubmission(BaseModel):
    """Request body for design generation.

    Attributes:
        description: Free-text clothing description.  Required and non-blank,
            but that rule is enforced by the handler so that a missing
            description gets its own error message.
        reference_image: Optional reference image, normally a ``data:`` URL.
            Only its presence affects the prompt.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    description: str | None = Field(
        default=None,
        description="Clothing description (required, non-blank).",
    )
    reference_image: str | None = Field(
        default=None,
        alias="referenceImage",
        description="Optional reference image as a data URL.",
    )

    @property
    def reference_image_present(self) -> bool:
        """Whether a reference image was supplied."""
        return self.reference_image is not None


class GeneratedDesign(BaseModel):
    """A single generated design.

    Attributes:
        url: Provider-hosted link to the image.
        revised_prompt: The provider's rewritten prompt, if it returned one.
            Omitted from the JSON output when absent.
    """

    url: str = Field(..., description="Link to the generated image.")
    revised_prompt: str | None = Field(
        default=None,
        description="Prompt as revised by the provider, when available.",
    )


class DesignResponse(BaseModel):
    """Successful response of ``POST /api/generate-design``."""

    designs: list[GeneratedDesign] = Field(default_factory=list)


class PromptPreviewResponse(BaseModel):
    """Response of ``POST /api/prompt/compile``."""

    prompt: str


class ErrorResponse(BaseModel):
    """Body of a failed request."""

    error: str
