"""
The durable server-side audio cache.

Audio lives in ``cache_dir`` as ``{key}.{ext}`` next to a ``cache_index.json``
that records the original text of every key. Files are permanent until
regenerated with ``force`` or removed with ``clear``.
"""

import json
import logging
import os
from pathlib import Path

from labas.application.srs.scheduler import utcnow
from labas.domain.audio.keys import audio_filename, derive_key, is_valid_key
from labas.domain.audio.models import BatchSynthesisReport, StoredAudio
from labas.domain.audio.ports import Synthesizer
from labas.domain.constants import AUDIO_EXTENSION, CACHE_INDEX_FILE
from labas.domain.errors import SynthesisError

logger = logging.getLogger(__name__)


class FileAudioStore:
    def __init__(
        self,
        cache_dir: Path,
        synthesizer: Synthesizer,
        extension: str = AUDIO_EXTENSION,
    ):
        self.cache_dir = Path(cache_dir)
        self.synthesizer = synthesizer
        self.extension = extension

    @property
    def index_path(self) -> Path:
        return self.cache_dir / CACHE_INDEX_FILE

    def path_for(self, key: str) -> Path:
        return self.cache_dir / audio_filename(key, self.extension)

    def exists(self, key: str) -> bool:
        return is_valid_key(key) and self.path_for(key).is_file()

    def load_index(self) -> dict[str, dict]:
        if not self.index_path.exists():
            return {}
        try:
            return json.loads(self.index_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not load cache index, starting fresh: {e}")
            return {}

    def save_index(self, index: dict[str, dict]) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.index_path.write_text(
            json.dumps(index, indent=2, ensure_ascii=False), encoding="utf-8"
        )

    async def synthesize(self, text: str, force: bool = False) -> StoredAudio:
        """
        Return stored audio for ``text``, synthesizing only on a cache miss or ``force``.

        Raises:
            ValueError: If ``text`` has no usable key.
            SynthesisError: If the synthesizer fails.
        """
        key = derive_key(text)
        if not key:
            raise ValueError(f"No audio key can be derived from {text!r}")

        filename = audio_filename(key, self.extension)
        path = self.path_for(key)
        index = self.load_index()

        if not force and path.is_file():
            if key not in index:
                logger.warning(f"File exists but no cache entry for '{key}', adopting it")
                index[key] = self._index_entry(text, filename, path.stat().st_size)
                self.save_index(index)
            logger.debug(f"Serving from cache: {filename}")
            return StoredAudio(key=key, filename=filename, cached=True)

        if not force and key in index:
            logger.warning(f"Cache entry exists but file missing: {path}")

        logger.info(f"Generating audio for {text[:50]!r} -> {filename}")
        audio = await self.synthesizer.synthesize(text)

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_bytes(audio)
        os.replace(tmp, path)

        index = self.load_index()
        index[key] = self._index_entry(text, filename, len(audio))
        self.save_index(index)
        return StoredAudio(key=key, filename=filename, cached=False)

    async def synthesize_batch(self, texts: list[str]) -> BatchSynthesisReport:
        """Synthesize every missing text; single failures are logged and counted."""
        report = BatchSynthesisReport(total=len(texts))
        for text in texts:
            try:
                stored = await self.synthesize(text)
            except (ValueError, SynthesisError) as e:
                logger.error(f"Failed {text!r}: {e}")
                report.failed += 1
                continue
            if stored.cached:
                report.cached += 1
            else:
                report.generated += 1

        logger.info(
            f"Batch complete: {report.cached} cached, {report.generated} generated, "
            f"{report.failed} failed"
        )
        return report

    def stats(self) -> dict[str, int]:
        index = self.load_index()
        total_files = 0
        total_size = 0
        for entry in index.values():
            path = self.cache_dir / entry.get("filename", "")
            if path.is_file():
                total_files += 1
                total_size += entry.get("file_size", 0)
        return {"total_files": total_files, "total_items": len(index), "total_size": total_size}

    def clear(self) -> int:
        """Remove every audio file and the index. Returns the number of files removed."""
        if not self.cache_dir.exists():
            return 0
        removed = 0
        for path in self.cache_dir.glob(f"*.{self.extension}"):
            path.unlink()
            removed += 1
        self.index_path.unlink(missing_ok=True)
        logger.info(f"Cleared cache: {removed} files removed from {self.cache_dir}")
        return removed

    def rebuild_index(self) -> int:
        """
        Rebuild the index from the files on disk.

        A file whose name is not a valid key is renamed to the key derived
        from its name. Known original texts are kept. Returns the number of
        indexed files.
        """
        if not self.cache_dir.exists():
            return 0
        old_index = self.load_index()
        new_index: dict[str, dict] = {}

        for path in sorted(self.cache_dir.glob(f"*.{self.extension}")):
            stem = path.stem
            old = old_index.get(stem) or next(
                (e for e in old_index.values() if e.get("filename") == path.name), None
            )
            original_text = old.get("original_text", stem) if old else stem

            key = derive_key(original_text)
            if not key:
                logger.warning(f"Skipping {path.name}: no key derivable")
                continue
            target = self.path_for(key)
            if target != path:
                if target.exists():
                    logger.warning(f"Skipping {path.name}: {target.name} already exists")
                    continue
                path.rename(target)
                logger.info(f"Renamed: {path.name} -> {target.name}")

            new_index[key] = {
                "original_text": original_text,
                "filename": target.name,
                "generated_at": old.get("generated_at") if old else utcnow().isoformat(),
                "file_size": target.stat().st_size,
            }

        self.save_index(new_index)
        logger.info(f"Cache rebuild complete: {len(new_index)} entries")
        return len(new_index)

    @staticmethod
    def _index_entry(text: str, filename: str, size: int) -> dict:
        return {
            "original_text": text,
            "filename": filename,
            "generated_at": utcnow().isoformat(),
            "file_size": size,
        }
