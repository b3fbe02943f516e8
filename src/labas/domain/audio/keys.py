"""
Cache key derivation for pronunciation audio.

The same function names files on the server and addresses them from the
client, so its output must never change for a given input.

The transliteration is many-to-one: "ą" and "a" map to the same key, so
"kasa" and "kąsa" share one audio file. This collision is accepted.
"""

import re

from labas.domain.constants import AUDIO_EXTENSION, KEY_MAX_LENGTH

TRANSLITERATION = str.maketrans(
    {
        "ą": "a",
        "č": "c",
        "ę": "e",
        "ė": "e",
        "į": "i",
        "š": "s",
        "ų": "u",
        "ū": "u",
        "ž": "z",
    }
)

_NON_KEY_CHARS = re.compile(r"[^a-z]")
_VALID_KEY = re.compile(rf"^[a-z]{{0,{KEY_MAX_LENGTH}}}$")


def derive_key(text: str) -> str:
    """
    Derive the cache key for ``text``.

    Lowercase, transliterate Lithuanian letters to ASCII, drop everything
    outside [a-z], truncate to 50 characters. Pure and total.

    >>> derive_key("Labas rytas!")
    'labasrytas'
    """
    folded = text.lower().translate(TRANSLITERATION)
    return _NON_KEY_CHARS.sub("", folded)[:KEY_MAX_LENGTH]


def is_valid_key(key: str) -> bool:
    return bool(_VALID_KEY.match(key))


def audio_filename(key: str, extension: str = AUDIO_EXTENSION) -> str:
    return f"{key}.{extension}"
