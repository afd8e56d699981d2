"""Shared pytest fixtures for Kawakubo tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from kawakubo.api.handler import GenerationHandler
from kawakubo.core.config import KawakuboConfig
from kawakubo.core.provider import ProviderImage


class FakeProvider:
    """In-memory stand-in for the image provider.

    Records every call.  Returns ``images`` or raises ``error`` when set.
    """

    def __init__(
        self,
        images: list[ProviderImage] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.images = images if images is not None else [ProviderImage(url="https://x/1.png")]
        self.error = error
        self.calls: list[dict] = []
        self.closed = False

    async def generate(self, prompt, *, count, size, quality, style):
        self.calls.append(
            {"prompt": prompt, "count": count, "size": size, "quality": quality, "style": style}
        )
        if self.error is not None:
            raise self.error
        return list(self.images)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def test_config() -> KawakuboConfig:
    """Configuration with a dummy API key and no .env file.

    Returns:
        KawakuboConfig instance for testing
    """
    return KawakuboConfig(_env_file=None, openai_api_key="sk-test")


@pytest.fixture
def unconfigured_config(monkeypatch) -> KawakuboConfig:
    """Configuration without any provider API key.

    Returns:
        KawakuboConfig instance for testing
    """
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("KAWAKUBO_OPENAI_API_KEY", raising=False)
    return KawakuboConfig(_env_file=None)


@pytest.fixture
def fake_provider() -> FakeProvider:
    """Provider that returns a single image."""
    return FakeProvider()


@pytest.fixture
def handler(test_config: KawakuboConfig, fake_provider: FakeProvider) -> GenerationHandler:
    """Handler wired to the fake provider."""
    return GenerationHandler(test_config, fake_provider)


@pytest.fixture
def test_client(handler: GenerationHandler) -> Generator[TestClient, None, None]:
    """FastAPI TestClient with the fake-provider handler installed.

    The application lifespan runs as normal; the handler it creates is then
    replaced so that no request ever reaches the real provider.
    """
    from kawakubo.api.main import app

    with TestClient(app) as client:
        app.state.handler = handler
        yield client


@pytest.fixture
def provider_factory() -> type[FakeProvider]:
    """Build fake providers with custom images or errors."""
    return FakeProvider
