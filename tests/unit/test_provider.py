"""Tests for kawakubo.core.provider: the OpenAI image provider.

The SDK client is real but its ``images.generate`` method is replaced with
an ``AsyncMock`` so no request leaves the process.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai
import pytest

from kawakubo.core.errors import ErrorKind, ProviderFailure, classify_provider_failure
from kawakubo.core.provider import OpenAIImageProvider, ProviderImage

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/images/generations")


def _client_returning(*items) -> openai.AsyncOpenAI:
    client = openai.AsyncOpenAI(api_key="sk-test", max_retries=0)
    client.images.generate = AsyncMock(return_value=SimpleNamespace(data=list(items)))
    return client


def _client_raising(error: Exception) -> openai.AsyncOpenAI:
    client = openai.AsyncOpenAI(api_key="sk-test", max_retries=0)
    client.images.generate = AsyncMock(side_effect=error)
    return client


def _status_error(cls, status: int, message: str, code: str | None):
    body = {"message": message, "type": "invalid_request_error", "code": code}
    return cls(message, response=httpx.Response(status, request=_REQUEST), body=body)


class TestProviderInit:
    """Tests for OpenAIImageProvider construction."""

    def test_builds_client_from_config(self, test_config):
        provider = OpenAIImageProvider(test_config)
        assert provider.model == "dall-e-3"
        assert isinstance(provider._client, openai.AsyncOpenAI)
        assert provider._client.max_retries == 0

    def test_requires_key_without_client(self, unconfigured_config):
        with pytest.raises(ValueError):
            OpenAIImageProvider(unconfigured_config)

    def test_injected_client_used(self, unconfigured_config):
        client = _client_returning()
        provider = OpenAIImageProvider(unconfigured_config, client=client)
        assert provider._client is client


class TestProviderGenerate:
    """Tests for OpenAIImageProvider.generate()."""

    @pytest.mark.asyncio
    async def test_passes_options(self, test_config):
        client = _client_returning(SimpleNamespace(url="https://x/1.png", revised_prompt=None))
        provider = OpenAIImageProvider(test_config, client=client)

        await provider.generate("a prompt", count=1, size="1024x1024", quality="hd", style="natural")

        client.images.generate.assert_awaited_once_with(
            model="dall-e-3",
            prompt="a prompt",
            n=1,
            size="1024x1024",
            quality="hd",
            style="natural",
        )

    @pytest.mark.asyncio
    async def test_normalises_images(self, test_config):
        client = _client_returning(
            SimpleNamespace(url="https://x/1.png", revised_prompt="revised"),
            SimpleNamespace(url="https://x/2.png", revised_prompt=None),
        )
        provider = OpenAIImageProvider(test_config, client=client)

        images = await provider.generate(
            "a prompt", count=1, size="1024x1024", quality="hd", style="natural"
        )

        assert images == [
            ProviderImage(url="https://x/1.png", revised_prompt="revised"),
            ProviderImage(url="https://x/2.png"),
        ]

    @pytest.mark.asyncio
    async def test_empty_data_gives_empty_list(self, test_config):
        provider = OpenAIImageProvider(test_config, client=_client_returning())
        images = await provider.generate(
            "a prompt", count=1, size="1024x1024", quality="hd", style="natural"
        )
        assert images == []


class TestProviderErrors:
    """SDK errors are translated into ProviderFailure."""

    @pytest.mark.asyncio
    async def test_rate_limit_error(self, test_config):
        error = _status_error(openai.RateLimitError, 429, "Too many requests", None)
        provider = OpenAIImageProvider(test_config, client=_client_raising(error))

        with pytest.raises(ProviderFailure) as exc_info:
            await provider.generate("p", count=1, size="1024x1024", quality="hd", style="natural")

        assert exc_info.value.code == "rate_limit_exceeded"
        assert classify_provider_failure(exc_info.value).kind is ErrorKind.RATE_LIMITED

    @pytest.mark.asyncio
    async def test_content_policy_error(self, test_config):
        error = _status_error(
            openai.BadRequestError,
            400,
            "Your request was rejected as a result of our safety system.",
            "content_policy_violation",
        )
        provider = OpenAIImageProvider(test_config, client=_client_raising(error))

        with pytest.raises(ProviderFailure) as exc_info:
            await provider.generate("p", count=1, size="1024x1024", quality="hd", style="natural")

        assert exc_info.value.code == "content_policy_violation"
        assert classify_provider_failure(exc_info.value).kind is ErrorKind.CONTENT_POLICY_VIOLATION

    @pytest.mark.asyncio
    async def test_connection_error(self, test_config):
        error = openai.APIConnectionError(request=_REQUEST)
        provider = OpenAIImageProvider(test_config, client=_client_raising(error))

        with pytest.raises(ProviderFailure) as exc_info:
            await provider.generate("p", count=1, size="1024x1024", quality="hd", style="natural")

        assert exc_info.value.code is None
        assert classify_provider_failure(exc_info.value).kind is ErrorKind.PROVIDER_ERROR

    @pytest.mark.asyncio
    async def test_original_error_chained(self, test_config):
        error = _status_error(openai.InternalServerError, 500, "boom", None)
        provider = OpenAIImageProvider(test_config, client=_client_raising(error))

        with pytest.raises(ProviderFailure) as exc_info:
            await provider.generate("p", count=1, size="1024x1024", quality="hd", style="natural")

        assert exc_info.value.__cause__ is error


class TestProviderClose:
    """Tests for OpenAIImageProvider.close()."""

    @pytest.mark.asyncio
    async def test_close_closes_client(self, test_config):
        client = _client_returning()
        client.close = AsyncMock()
        provider = OpenAIImageProvider(test_config, client=client)

        await provider.close()

        client.close.assert_awaited_once()
