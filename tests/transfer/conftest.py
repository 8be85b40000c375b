"""Fixtures for transfer tests."""

import typing as t

import pytest

from resumable_fetch.infrastructure.http import AiohttpClient, BaseHttpClient
from resumable_fetch.transfer import ResumableFetch

from .fakes import CHUNK_SIZE, TEST_URL, FakeHttpClient


@pytest.fixture
def fake_client() -> FakeHttpClient:
    return FakeHttpClient()


@pytest.fixture
def http_client(aio_client, mock_logger) -> AiohttpClient:
    """AiohttpClient over the shared test session (intercepted by aioresponses)."""
    return AiohttpClient(session=aio_client, logger=mock_logger)


@pytest.fixture
def make_fetch(mock_logger, real_emitter):
    """Factory for ResumableFetch with test defaults."""

    def _make_fetch(client: BaseHttpClient, **kwargs: t.Any) -> ResumableFetch:
        kwargs.setdefault("chunk_size", CHUNK_SIZE)
        kwargs.setdefault("logger", mock_logger)
        kwargs.setdefault("emitter", real_emitter)
        return ResumableFetch(TEST_URL, client, **kwargs)

    return _make_fetch


@pytest.fixture
def progress_log():
    """List collecting TransferProgress snapshots from on_progress."""
    return []
