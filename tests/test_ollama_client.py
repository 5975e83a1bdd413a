"""Unit tests for OllamaClient (scaffold_engine.ollama_client).

Tests cover:
- OllamaResponse defaults
- OllamaClient.__init__
- OllamaClient.generate (success, JSON format, connect error, timeout, HTTP error, unexpected error)
- OllamaClient.generate_with_fallback
- OllamaClient.is_available
- OllamaClient.list_models
- Static helpers: _extract_text, _extract_duration_ms
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from scaffold_engine.ollama_client import OllamaClient, OllamaResponse


def _async_client(**methods: AsyncMock) -> AsyncMock:
    mock_client = AsyncMock()
    for name, method in methods.items():
        setattr(mock_client, name, method)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


# ---------------------------------------------------------------------------
# OllamaResponse
# ---------------------------------------------------------------------------


class TestOllamaResponse:
    @pytest.mark.unit
    def test_defaults(self):
        resp = OllamaResponse()
        assert resp.text == ""
        assert resp.model == ""
        assert resp.duration_ms == 0.0
        assert resp.success is True
        assert resp.error is None

    @pytest.mark.unit
    def test_error_response(self):
        resp = OllamaResponse(success=False, error="Connection refused")
        assert resp.success is False
        assert resp.error == "Connection refused"


# ---------------------------------------------------------------------------
# OllamaClient.__init__
# ---------------------------------------------------------------------------


class TestOllamaClientInit:
    @pytest.mark.unit
    def test_defaults(self):
        client = OllamaClient()
        assert client.base_url == "http://localhost:11434"
        assert client.timeout == 120

    @pytest.mark.unit
    def test_trailing_slash_stripped(self):
        client = OllamaClient(base_url="http://host:1234/", timeout=60)
        assert client.base_url == "http://host:1234"
        assert client.timeout == 60


# ---------------------------------------------------------------------------
# Static helpers
# ---------------------------------------------------------------------------


class TestStaticHelpers:
    @pytest.mark.unit
    def test_extract_text(self):
        assert OllamaClient._extract_text({"response": "Hello World"}) == "Hello World"

    @pytest.mark.unit
    def test_extract_text_missing(self):
        assert OllamaClient._extract_text({}) == ""

    @pytest.mark.unit
    def test_extract_duration_ms(self):
        data = {"total_duration": 1_500_000_000}  # 1.5 seconds in nanoseconds
        assert abs(OllamaClient._extract_duration_ms(data) - 1500.0) < 0.1

    @pytest.mark.unit
    def test_extract_duration_ms_missing(self):
        assert OllamaClient._extract_duration_ms({}) == 0.0


# ---------------------------------------------------------------------------
# OllamaClient.generate
# ---------------------------------------------------------------------------


class TestOllamaGenerate:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_generate(self):
        mock_response = MagicMock()
        mock_response.json.return_value = {
            "response": '{"files": []}',
            "model": "qwen2.5-coder:32b",
            "total_duration": 2_000_000_000,
        }
        mock_response.raise_for_status = MagicMock()
        mock_client = _async_client(post=AsyncMock(return_value=mock_response))

        with patch("httpx.AsyncClient", return_value=mock_client):
            result = await OllamaClient().generate("Suggest files")

        assert result.success is True
        assert result.text == '{"files": []}'
        assert result.model == "qwen2.5-coder:32b"
        assert result.duration_ms == pytest.approx(2000.0)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_payload_includes_optional_fields(self):
        mock_response = MagicMock()
        mock_response.json.return_value = {"response": "{}", "model": "m"}
        mock_response.raise_for_status = MagicMock()
        mock_client = _async_client(post=AsyncMock(return_value=mock_response))

        with patch("httpx.AsyncClient", return_value=mock_client):
            await OllamaClient().generate(
                "Write code",
                model="m",
                system="You are an architect",
                format="json",
                options={"temperature": 0.3},
            )

        url = mock_client.post.call_args[0][0]
        payload = mock_client.post.call_args[1]["json"]
        assert url == "/api/generate"
        assert payload["system"] == "You are an architect"
        assert payload["format"] == "json"
        assert payload["options"] == {"temperature": 0.3}
        assert payload["stream"] is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_payload_omits_empty_fields(self):
        mock_response = MagicMock()
        mock_response.json.return_value = {"response": "ok"}
        mock_response.raise_for_status = MagicMock()
        mock_client = _async_client(post=AsyncMock(return_value=mock_response))

        with patch("httpx.AsyncClient", return_value=mock_client):
            await OllamaClient().generate("plain")

        payload = mock_client.post.call_args[1]["json"]
        assert "system" not in payload
        assert "format" not in payload
        assert "options" not in payload

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_generate_connect_error(self):
        mock_client = _async_client(post=AsyncMock(side_effect=httpx.ConnectError("refused")))

        with patch("httpx.AsyncClient", return_value=mock_client):
            result = await OllamaClient().generate("test prompt")

        assert result.success is False
        assert "Cannot connect" in result.error

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_generate_timeout(self):
        mock_client = _async_client(
            post=AsyncMock(side_effect=httpx.TimeoutException("timed out"))
        )

        with patch("httpx.AsyncClient", return_value=mock_client):
            result = await OllamaClient().generate("test prompt")

        assert result.success is False
        assert "timed out" in result.error

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_generate_http_error(self):
        mock_resp = MagicMock()
        mock_resp.status_code = 500
        mock_resp.text = "Internal Server Error"
        mock_client = _async_client(
            post=AsyncMock(
                side_effect=httpx.HTTPStatusError(
                    "Server Error", request=MagicMock(), response=mock_resp
                )
            )
        )

        with patch("httpx.AsyncClient", return_value=mock_client):
            result = await OllamaClient().generate("test prompt")

        assert result.success is False
        assert "HTTP 500" in result.error

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_generate_unexpected_error(self):
        mock_client = _async_client(post=AsyncMock(side_effect=RuntimeError("something weird")))

        with patch("httpx.AsyncClient", return_value=mock_client):
            result = await OllamaClient().generate("test prompt")

        assert result.success is False
        assert "Unexpected error" in result.error


# ---------------------------------------------------------------------------
# OllamaClient.generate_with_fallback
# ---------------------------------------------------------------------------


class TestOllamaGenerateWithFallback:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_primary_succeeds(self):
        client = OllamaClient()
        primary = OllamaResponse(text="primary", success=True, model="primary")

        with patch.object(client, "generate", new=AsyncMock(return_value=primary)) as gen:
            result = await client.generate_with_fallback("test")

        assert result.text == "primary"
        assert gen.await_count == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fallback_on_primary_failure(self):
        client = OllamaClient()
        responses = [
            OllamaResponse(success=False, error="model not found"),
            OllamaResponse(text="fallback result", success=True, model="fallback"),
        ]

        with patch.object(client, "generate", new=AsyncMock(side_effect=responses)) as gen:
            result = await client.generate_with_fallback(
                "test", primary_model="big", fallback_model="small"
            )

        assert result.success is True
        assert result.text == "fallback result"
        assert gen.await_args_list[1].kwargs["model"] == "small"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_retry_when_fallback_equals_primary(self):
        client = OllamaClient()
        failed = OllamaResponse(success=False, error="boom")

        with patch.object(client, "generate", new=AsyncMock(return_value=failed)) as gen:
            result = await client.generate_with_fallback(
                "test", primary_model="same", fallback_model="same"
            )

        assert result.success is False
        assert gen.await_count == 1


# ---------------------------------------------------------------------------
# OllamaClient.is_available / list_models
# ---------------------------------------------------------------------------


class TestOllamaTags:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_is_available_true(self):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_client = _async_client(get=AsyncMock(return_value=mock_response))

        with patch("httpx.AsyncClient", return_value=mock_client):
            assert await OllamaClient().is_available() is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_is_available_connect_error(self):
        mock_client = _async_client(get=AsyncMock(side_effect=httpx.ConnectError("refused")))

        with patch("httpx.AsyncClient", return_value=mock_client):
            assert await OllamaClient().is_available() is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_list_models_sorted(self):
        mock_response = MagicMock()
        mock_response.json.return_value = {
            "models": [{"name": "qwen2.5-coder:32b"}, {"name": "llama3.1:8b"}, {"size": 1}]
        }
        mock_response.raise_for_status = MagicMock()
        mock_client = _async_client(get=AsyncMock(return_value=mock_response))

        with patch("httpx.AsyncClient", return_value=mock_client):
            models = await OllamaClient().list_models()

        assert models == ["llama3.1:8b", "qwen2.5-coder:32b"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_list_models_unreachable(self):
        mock_client = _async_client(get=AsyncMock(side_effect=httpx.ConnectError("refused")))

        with patch("httpx.AsyncClient", return_value=mock_client):
            assert await OllamaClient().list_models() == []
