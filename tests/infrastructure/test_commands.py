from unittest.mock import AsyncMock, patch

import pytest

from labas.domain.errors import AudioError, SynthesisError
from labas.infrastructure.commands import (
    CommandAudioPlayer,
    CommandLocalVoice,
    CommandSynthesizer,
    UnconfiguredSynthesizer,
    build_argv,
)


def test_build_argv_keeps_text_as_one_argument():
    argv = build_argv("espeak-ng -v lt -w {output} {text}", text="Labas rytas", output="/tmp/a.mp3")
    assert argv == ["espeak-ng", "-v", "lt", "-w", "/tmp/a.mp3", "Labas rytas"]


def test_build_argv_embedded_placeholder():
    assert build_argv("mpv --really-quiet url={url}", url="http://x/a.mp3") == [
        "mpv",
        "--really-quiet",
        "url=http://x/a.mp3",
    ]


@pytest.mark.asyncio
async def test_synthesizer_reads_stdout_when_no_output_file():
    with patch(
        "labas.infrastructure.commands.run_command", new=AsyncMock(return_value=b"RIFF")
    ) as run:
        audio = await CommandSynthesizer("say-lt {text}").synthesize("labas")
    assert audio == b"RIFF"
    assert run.call_args.args[0] == ["say-lt", "labas"]


@pytest.mark.asyncio
async def test_synthesizer_reads_output_file():
    async def fake_run(argv, timeout):
        with open(argv[-1], "wb") as f:
            f.write(b"ID3")
        return b""

    with patch("labas.infrastructure.commands.run_command", new=fake_run):
        audio = await CommandSynthesizer("tts {text} {output}").synthesize("labas")
    assert audio == b"ID3"


@pytest.mark.asyncio
async def test_synthesizer_errors():
    failing = AsyncMock(side_effect=RuntimeError("tts exited with 1"))
    with patch("labas.infrastructure.commands.run_command", new=failing):
        with pytest.raises(SynthesisError):
            await CommandSynthesizer("tts {text}").synthesize("labas")

    with patch("labas.infrastructure.commands.run_command", new=AsyncMock(return_value=b"")):
        with pytest.raises(SynthesisError):
            await CommandSynthesizer("tts {text}").synthesize("labas")

    with pytest.raises(SynthesisError):
        await UnconfiguredSynthesizer().synthesize("labas")


@pytest.mark.asyncio
async def test_player_and_local_voice():
    run = AsyncMock(return_value=b"")
    with patch("labas.infrastructure.commands.run_command", new=run):
        await CommandAudioPlayer("mpv {url}").play("http://x/labas.mp3")
        await CommandLocalVoice("espeak-ng -v lt {text}").speak("labas")
    assert run.call_args_list[0].args[0] == ["mpv", "http://x/labas.mp3"]
    assert run.call_args_list[1].args[0] == ["espeak-ng", "-v", "lt", "labas"]

    failing = AsyncMock(side_effect=RuntimeError("mpv not found"))
    with patch("labas.infrastructure.commands.run_command", new=failing):
        with pytest.raises(AudioError):
            await CommandAudioPlayer("mpv {url}").play("http://x/labas.mp3")
        with pytest.raises(AudioError):
            await CommandLocalVoice("espeak {text}").speak("labas")
