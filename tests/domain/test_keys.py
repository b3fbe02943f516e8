import pytest

from labas.domain.audio.keys import audio_filename, derive_key, is_valid_key


def test_case_folding():
    assert derive_key("Labas") == derive_key("LABAS") == "labas"


def test_punctuation_and_spaces_removed():
    assert derive_key("Labas rytas!") == derive_key("labas rytas") == "labasrytas"


def test_question_has_no_punctuation():
    key = derive_key("Kaip sekasi?")
    assert key == "kaipsekasi"
    assert key.isalpha()


def test_lithuanian_letters_transliterated():
    key = derive_key("Ąžuolas")
    assert key == "azuolas"
    assert key.isascii()
    assert len(key) <= 50


@pytest.mark.parametrize(
    "text, expected",
    [
        ("ačiū", "aciu"),
        ("Ęė Įį Šš Ųų Ūū Žž Čč", "eeiissuuuuzzcc"),
        ("Aš nekalbu lietuviškai", "asnekalbulietuviskai"),
    ],
)
def test_full_transliteration_table(text, expected):
    assert derive_key(text) == expected


def test_many_to_one_collision_is_accepted():
    assert derive_key("kąsa") == derive_key("kasa")


def test_non_latin_scripts_collapse():
    assert derive_key("Привет 123 ...") == ""
    assert derive_key("") == ""


def test_truncated_to_fifty_characters():
    text = "Ar galite man padėti? " * 10
    key = derive_key(text)
    assert len(key) == 50
    assert key.startswith("argalitemanpadeti")


def test_deterministic_and_idempotent():
    text = "Kiek tai kainuoja?"
    assert derive_key(text) == derive_key(text)
    assert derive_key(derive_key(text)) == derive_key(text)


def test_valid_keys():
    assert is_valid_key("labas")
    assert is_valid_key("")
    assert not is_valid_key("../etc")
    assert not is_valid_key("a" * 51)
    assert audio_filename("labas") == "labas.mp3"
    assert audio_filename("labas", "wav") == "labas.wav"
