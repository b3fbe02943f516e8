import logging
from typing import Any

import httpx

from labas.domain.audio.keys import audio_filename, derive_key
from labas.domain.audio.models import BatchSynthesis, SynthesisResult
from labas.domain.audio.ports import AudioEndpoint
from labas.domain.constants import AUDIO_EXTENSION, PROBE_TIMEOUT, REQUEST_TIMEOUT
from labas.domain.errors import EndpointUnreachable, MalformedResponse


class HttpAudioEndpoint(AudioEndpoint):
    """Adapter for a durable audio store served over HTTP (the labas server)."""

    def __init__(
        self,
        name: str,
        base_url: str,
        cache_path: str = "audio_cache",
        extension: str = AUDIO_EXTENSION,
        probe_timeout: float = PROBE_TIMEOUT,
        request_timeout: float = REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.cache_path = cache_path.strip("/")
        self.extension = extension
        self.probe_timeout = probe_timeout
        self.request_timeout = request_timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.request_timeout)
        return self._client

    def audio_url(self, key: str) -> str:
        filename = audio_filename(key, self.extension)
        if self.cache_path:
            return f"{self.base_url}/{self.cache_path}/{filename}"
        return f"{self.base_url}/{filename}"

    async def exists(self, key: str) -> bool:
        url = self.audio_url(key)
        try:
            resp = await self._get_client().head(
                url, timeout=self.probe_timeout, headers={"Cache-Control": "no-cache"}
            )
        except httpx.HTTPError as e:
            raise EndpointUnreachable(self.name, f"HEAD {url} failed: {e!r}") from e

        self.logger.debug(f"[{self.name}] HEAD {url} -> {resp.status_code}")
        if resp.is_success:
            return True
        if resp.status_code == 404:
            return False
        raise EndpointUnreachable(self.name, f"HEAD {url} returned {resp.status_code}")

    async def synthesize(self, text: str, force: bool = False) -> SynthesisResult:
        params = {"text": text, "force": "true" if force else "false"}
        data = await self._request("GET", "/tts/generate", params=params)
        key = data.get("key") or derive_key(text)
        return SynthesisResult(
            key=self._field(key, "key"),
            url=self._field(data.get("audio_url"), "audio_url"),
            cached=bool(data.get("cached", False)),
        )

    async def batch_synthesize(self, texts: list[str]) -> BatchSynthesis:
        data = await self._request("POST", "/tts/batch", json={"texts": texts})
        files = data.get("audio_files")
        if not isinstance(files, list):
            raise MalformedResponse(self.name, "batch response has no audio_files list")

        urls = {}
        for f in files:
            if not isinstance(f, dict):
                raise MalformedResponse(self.name, f"batch entry is {type(f).__name__}")
            urls[self._field(f.get("key"), "key")] = self._field(f.get("audio_url"), "audio_url")

        cached, generated = data.get("cached"), data.get("generated")
        if not isinstance(cached, int) or not isinstance(generated, int):
            # no counts reported: treat every returned file as new
            cached, generated = 0, len(urls)
        return BatchSynthesis(urls=urls, cached=cached, generated=generated)

    def _field(self, value: Any, name: str) -> str:
        if not isinstance(value, str) or not value:
            raise MalformedResponse(self.name, f"response has no usable {name}: {value!r}")
        return value

    async def health(self) -> bool:
        """Check if the endpoint is reachable. Never raises."""
        try:
            resp = await self._get_client().get(
                f"{self.base_url}/tts/health", timeout=self.probe_timeout
            )
            return resp.is_success
        except httpx.HTTPError as e:
            self.logger.warning(f"[{self.name}] not available: {e!r}")
            return False

    async def cache_stats(self) -> dict | None:
        data = await self._request("GET", "/tts/cache/stats")
        stats = data.get("stats")
        return stats if isinstance(stats, dict) else None

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict:
        url = f"{self.base_url}{path}"
        try:
            resp = await self._get_client().request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise EndpointUnreachable(self.name, f"{method} {path} failed: {e!r}") from e

        if not resp.is_success:
            raise EndpointUnreachable(self.name, f"{method} {path} returned {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponse(self.name, f"{method} {path} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise MalformedResponse(self.name, f"{method} {path} returned {type(data).__name__}")
        if not data.get("success", False):
            raise EndpointUnreachable(self.name, str(data.get("error") or "request failed"))
        return data

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
