"""Tests for ResumableResponse."""

import pytest

from resumable_fetch.transfer import ResumableResponse

from .fakes import TEST_URL

CHUNKS = [b"hello ", b"resumable ", b"world"]


@pytest.fixture
def response() -> ResumableResponse:
    return ResumableResponse(
        TEST_URL, CHUNKS, content_type="text/plain", content_length=21
    )


class TestHeaders:
    def test_headers_are_case_insensitive(self, response: ResumableResponse) -> None:
        assert response.headers["content-type"] == "text/plain"
        assert response.headers["CONTENT-LENGTH"] == "21"
        assert response.content_type == "text/plain"
        assert response.content_length == 21

    def test_headers_are_read_only(self, response: ResumableResponse) -> None:
        with pytest.raises(TypeError):
            response.headers["X-Extra"] = "1"  # type: ignore[index]

    def test_content_length_falls_back_to_size(self) -> None:
        response = ResumableResponse(TEST_URL, CHUNKS)

        assert response.content_length == 21
        assert response.content_type is None
        assert "Content-Type" not in response.headers

    def test_defaults_to_ok_status(self, response: ResumableResponse) -> None:
        assert response.status == 200


class TestBody:
    @pytest.mark.asyncio
    async def test_read_joins_chunks(self, response: ResumableResponse) -> None:
        assert await response.read() == b"hello resumable world"
        assert response.size == 21

    @pytest.mark.asyncio
    async def test_async_iteration_replays_original_chunks(
        self, response: ResumableResponse
    ) -> None:
        assert [chunk async for chunk in response] == CHUNKS
        # Replay is repeatable
        assert [chunk async for chunk in response.iter_chunks()] == CHUNKS

    @pytest.mark.asyncio
    async def test_iter_chunked_recuts_body(self, response: ResumableResponse) -> None:
        pieces = [piece async for piece in response.iter_chunked(8)]

        assert pieces == [b"hello re", b"sumable ", b"world"]

    @pytest.mark.asyncio
    async def test_iter_chunked_rejects_non_positive(
        self, response: ResumableResponse
    ) -> None:
        with pytest.raises(ValueError):
            async for _ in response.iter_chunked(0):
                pass

    @pytest.mark.asyncio
    async def test_text_decodes(self) -> None:
        response = ResumableResponse(TEST_URL, ["café".encode("latin-1")])

        assert await response.text("latin-1") == "café"
        assert await response.text(errors="replace") == "caf�"

    @pytest.mark.asyncio
    async def test_empty_body(self) -> None:
        response = ResumableResponse(TEST_URL, [])

        assert await response.read() == b""
        assert response.content_length == 0


class TestSave:
    @pytest.mark.asyncio
    async def test_save_writes_body(self, response: ResumableResponse, tmp_path) -> None:
        destination = tmp_path / "clip.txt"

        written = await response.save(destination)

        assert written == destination
        assert destination.read_bytes() == b"hello resumable world"

    @pytest.mark.asyncio
    async def test_save_accepts_str_path(
        self, response: ResumableResponse, tmp_path
    ) -> None:
        written = await response.save(str(tmp_path / "clip.txt"))

        assert written == tmp_path / "clip.txt"


def test_repr_mentions_status_and_size(response: ResumableResponse) -> None:
    assert repr(response) == (
        f"<ResumableResponse [200] {TEST_URL} text/plain, 21 bytes>"
    )
