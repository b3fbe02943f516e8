import logging
import re
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import FileResponse
from pydantic import BaseModel

from labas.consts import VERSION
from labas.domain.audio.keys import audio_filename, derive_key, is_valid_key
from labas.domain.errors import SynthesisError
from labas.infrastructure.audio_store import FileAudioStore

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("labas.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Labas TTS Server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("Labas TTS Server shutting down...")


app = FastAPI(
    title="Labas TTS Server",
    description="Durable pronunciation audio store for the labas vocabulary trainer.",
    version=VERSION,
    lifespan=lifespan,
)

start_time = time.time()


def get_store() -> FileAudioStore:
    """Audio store built from the resolved configuration, created once per process."""
    store = getattr(app.state, "store", None)
    if store is None:
        from labas.application.config import resolve_config
        from labas.application.factory import get_audio_store

        store = get_audio_store(resolve_config())
        app.state.store = store
        logger.info(f"Serving audio files from: {store.cache_dir}")
    return store


def _audio_url(request: Request, filename: str) -> str:
    return f"{request.base_url}audio_cache/{filename}"


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class GenerateResponse(BaseModel):
    success: bool
    text: str
    key: str
    filename: str
    audio_url: str
    cached: bool


class BatchRequest(BaseModel):
    texts: list[str]


class AudioFile(BaseModel):
    text: str
    key: str
    filename: str
    audio_url: str


class BatchResponse(BaseModel):
    success: bool
    total: int
    cached: int
    generated: int
    failed: int
    audio_files: list[AudioFile]


class CacheCheckResponse(BaseModel):
    success: bool
    key: str
    filename: str
    exists: bool
    audio_url: str | None


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/tts/health")
async def tts_health():
    return {"success": True, "service": "Labas TTS Server", "status": "running"}


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/tts/generate", response_model=GenerateResponse)
async def generate(
    request: Request,
    text: str = "",
    force: bool = False,
    store: FileAudioStore = Depends(get_store),
):
    """
    Return audio for ``text``, synthesizing it only if the durable cache misses.
    """
    if not text.strip():
        raise HTTPException(status_code=400, detail="Text parameter is required")
    if not derive_key(text):
        raise HTTPException(status_code=400, detail="Text has no pronounceable letters")

    logger.info(f"TTS request: {text!r} (force={force})")
    try:
        stored = await store.synthesize(text, force=force)
    except SynthesisError as e:
        logger.error(f"TTS generation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e

    return GenerateResponse(
        success=True,
        text=text,
        key=stored.key,
        filename=stored.filename,
        audio_url=_audio_url(request, stored.filename),
        cached=stored.cached,
    )


@app.post("/tts/batch", response_model=BatchResponse)
async def generate_batch(
    req: BatchRequest, request: Request, store: FileAudioStore = Depends(get_store)
):
    """Generate audio for several texts; already stored ones are not regenerated."""
    report = await store.synthesize_batch(req.texts)

    audio_files = []
    for text in req.texts:
        key = derive_key(text)
        if not store.exists(key):
            continue
        filename = audio_filename(key, store.extension)
        audio_files.append(
            AudioFile(text=text, key=key, filename=filename, audio_url=_audio_url(request, filename))
        )

    return BatchResponse(
        success=True,
        total=report.total,
        cached=report.cached,
        generated=report.generated,
        failed=report.failed,
        audio_files=audio_files,
    )


@app.get("/tts/cache/check/{key}", response_model=CacheCheckResponse)
async def check_cache(key: str, request: Request, store: FileAudioStore = Depends(get_store)):
    filename = audio_filename(key, store.extension)
    exists = store.exists(key)
    return CacheCheckResponse(
        success=True,
        key=key,
        filename=filename,
        exists=exists,
        audio_url=_audio_url(request, filename) if exists else None,
    )


@app.get("/tts/cache/stats")
async def cache_stats(store: FileAudioStore = Depends(get_store)):
    return {"success": True, "stats": store.stats()}


@app.api_route("/audio_cache/{filename}", methods=["GET", "HEAD"])
async def serve_audio(filename: str, store: FileAudioStore = Depends(get_store)):
    """Serve a stored audio file. Only ``{key}.{ext}`` names are accepted."""
    match = re.fullmatch(rf"([a-z]+)\.{re.escape(store.extension)}", filename)
    if not match or not is_valid_key(match.group(1)) or not store.exists(match.group(1)):
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(store.path_for(match.group(1)))
