"""Tests for :mod:`imagestudio.client`."""

from __future__ import annotations

import base64
import json

import httpx
import pytest

from imagestudio.client import (
    GeneratedImage,
    ImageStudioClient,
    ImageStudioClientError,
    download_filename,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nstub"
PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")


def _client(handler) -> tuple[ImageStudioClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http = httpx.Client(transport=httpx.MockTransport(record), base_url="http://testserver")
    return ImageStudioClient(http_client=http), seen


def test_generate_posts_prompt_and_builds_data_url() -> None:
    client, seen = _client(lambda request: httpx.Response(200, json={"imageUrl": PNG_B64}))

    image = client.generate("a red fox")

    assert seen[0].method == "POST"
    assert seen[0].url.path == "/generate-image"
    assert json.loads(seen[0].content) == {"prompt": "a red fox"}
    assert image.prompt == "a red fox"
    assert image.image_b64 == PNG_B64
    assert image.data_url == f"data:image/png;base64,{PNG_B64}"


def test_history_is_most_recent_first() -> None:
    client, _ = _client(lambda request: httpx.Response(200, json={"imageUrl": PNG_B64}))

    first = client.generate("one")
    second = client.generate("two")

    assert client.history == [second, first]
    assert client.current is second


@pytest.mark.parametrize("prompt", ["", "   "])
def test_blank_prompt_is_rejected_locally(prompt: str) -> None:
    client, seen = _client(lambda request: httpx.Response(200, json={"imageUrl": PNG_B64}))

    with pytest.raises(ImageStudioClientError, match="Please enter a prompt"):
        client.generate(prompt)

    assert seen == []


@pytest.mark.parametrize(
    ("status_code", "message"),
    [
        (400, "Invalid prompt or request"),
        (429, "Rate limit exceeded. Please try again later."),
        (500, "Failed to generate image. Please try again."),
    ],
)
def test_server_error_message_is_surfaced_verbatim(status_code: int, message: str) -> None:
    client, seen = _client(lambda request: httpx.Response(status_code, json={"error": message}))

    with pytest.raises(ImageStudioClientError) as excinfo:
        client.generate("cat")

    assert excinfo.value.message == message
    assert excinfo.value.status_code == status_code
    assert len(seen) == 1
    assert client.history == []


def test_error_without_json_body_uses_fallback_message() -> None:
    client, _ = _client(lambda request: httpx.Response(502, text="Bad Gateway"))

    with pytest.raises(ImageStudioClientError) as excinfo:
        client.generate("cat")

    assert excinfo.value.message == "Failed to generate image"
    assert excinfo.value.status_code == 502


def test_success_without_image_is_a_failure() -> None:
    client, _ = _client(lambda request: httpx.Response(200, json={}))

    with pytest.raises(ImageStudioClientError):
        client.generate("cat")


@pytest.mark.parametrize(
    ("prompt", "expected"),
    [
        ("a red fox", "a_red_fox.png"),
        ("Sunset over the sea, with boats & birds!", "Sunset_over_the_sea__with_boat.png"),
        ("", "generated-image.png"),
    ],
)
def test_download_filename(prompt: str, expected: str) -> None:
    assert download_filename(prompt) == expected


def test_download_writes_decoded_png(tmp_path) -> None:
    image = GeneratedImage(prompt="a red fox", image_b64=PNG_B64)

    path = image.download(tmp_path / "out")

    assert path == tmp_path / "out" / "a_red_fox.png"
    assert path.read_bytes() == PNG_BYTES


def test_context_manager_leaves_injected_http_client_open() -> None:
    http = httpx.Client(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"imageUrl": PNG_B64})),
        base_url="http://testserver",
    )

    with ImageStudioClient(http_client=http) as client:
        client.generate("cat")

    assert not http.is_closed
    http.close()


def test_default_http_client_keeps_transport_timeout() -> None:
    client = ImageStudioClient(base_url="http://testserver")
    try:
        assert client._http.timeout == httpx.Timeout(5.0)
    finally:
        client.close()
