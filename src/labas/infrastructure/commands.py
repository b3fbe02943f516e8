"""
Adapters that delegate synthesis, playback and the local voice to external programs.

Commands are configured as strings with ``{text}``, ``{output}`` and ``{url}``
placeholders, e.g. ``espeak-ng -v lt -w {output} {text}``.
"""

import asyncio
import logging
import shlex
import tempfile
from pathlib import Path

from labas.domain.audio.ports import AudioPlayer, LocalVoice, Synthesizer
from labas.domain.constants import COMMAND_TIMEOUT
from labas.domain.errors import AudioError, SynthesisError

logger = logging.getLogger(__name__)


def build_argv(template: str, **values: str) -> list[str]:
    """Split ``template`` like a shell would and fill placeholders per argument."""
    argv = []
    for arg in shlex.split(template):
        for name, value in values.items():
            arg = arg.replace("{" + name + "}", value)
        argv.append(arg)
    return argv


async def run_command(argv: list[str], timeout: float = COMMAND_TIMEOUT) -> bytes:
    """
    Run ``argv`` and return its stdout.

    Raises:
        RuntimeError: If the program is missing, times out or exits non-zero.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise RuntimeError(f"{argv[0]} not found") from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        proc.kill()
        await proc.wait()
        raise RuntimeError(f"{argv[0]} timed out after {timeout}s") from e

    if proc.returncode != 0:
        raise RuntimeError(
            f"{argv[0]} exited with {proc.returncode}: {stderr.decode('utf-8', 'replace').strip()}"
        )
    return stdout


class CommandSynthesizer(Synthesizer):
    """Synthesizes by running a command that writes audio to ``{output}``."""

    def __init__(self, template: str, extension: str = "mp3", timeout: float = COMMAND_TIMEOUT):
        self.template = template
        self.extension = extension
        self.timeout = timeout

    async def synthesize(self, text: str) -> bytes:
        with tempfile.TemporaryDirectory(prefix="labas-") as tmp:
            output = Path(tmp) / f"speech.{self.extension}"
            argv = build_argv(self.template, text=text, output=str(output))
            try:
                stdout = await run_command(argv, self.timeout)
            except RuntimeError as e:
                raise SynthesisError(f"Synthesis failed: {e}") from e

            # Commands without {output} write audio to stdout
            audio = output.read_bytes() if output.exists() else stdout
        if not audio:
            raise SynthesisError(f"Synthesis produced no audio for {text!r}")
        return audio


class UnconfiguredSynthesizer(Synthesizer):
    async def synthesize(self, text: str) -> bytes:
        raise SynthesisError("No synthesizer configured (set LABAS_SYNTH_COMMAND)")


class CommandAudioPlayer(AudioPlayer):
    def __init__(self, template: str, timeout: float = COMMAND_TIMEOUT):
        self.template = template
        self.timeout = timeout

    async def play(self, url: str) -> None:
        try:
            await run_command(build_argv(self.template, url=url), self.timeout)
        except RuntimeError as e:
            raise AudioError(f"Playback failed: {e}") from e


class CommandLocalVoice(LocalVoice):
    def __init__(self, template: str, timeout: float = COMMAND_TIMEOUT):
        self.template = template
        self.timeout = timeout

    async def speak(self, text: str) -> None:
        logger.info(f"Speaking {text!r} with the local voice")
        try:
            await run_command(build_argv(self.template, text=text), self.timeout)
        except RuntimeError as e:
            raise AudioError(f"Local voice failed: {e}") from e
