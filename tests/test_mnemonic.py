import pytest

from gsm.mnemonic import fallback_name, generate_mnemonic
from gsm.wordlist import get_words


# md5("abc") = 900150983cd24fb0..., so the seed is 0x900150983cd24fb and with a
# sixteen word dictionary every pick is one hex digit read from the right.
def test_picks_follow_seed_digits(small_dictionary):
    assert generate_mnemonic("abc", 3, small_dictionary) == "W11W15W4"


def test_empty_secret_is_still_named(small_dictionary):
    # md5("") = d41d8cd98f00b204...
    assert generate_mnemonic("", 3, small_dictionary) == "W0W2W11"


def test_exhausted_seed_repeats_first_word(small_dictionary):
    name = generate_mnemonic("abc", 17, small_dictionary)

    assert name.endswith("W9W0W0")


def test_is_deterministic_with_real_dictionary():
    words = get_words()

    first = generate_mnemonic("abc123", 3, words)
    second = generate_mnemonic("abc123", 3, words)

    assert first == second
    assert first[0].isupper()
    assert first != generate_mnemonic("abc124", 3, words)


def test_capitalises_only_first_letter():
    assert generate_mnemonic("abc", 2, ["mIxEd"]) == "MIxEdMIxEd"


def test_rejects_non_positive_word_count(small_dictionary):
    with pytest.raises(ValueError, match="number of words must be greater than 0"):
        generate_mnemonic("abc", 0, small_dictionary)


def test_rejects_empty_dictionary():
    with pytest.raises(ValueError, match="dictionary is empty"):
        generate_mnemonic("abc", 3, [])


def test_fallback_name_uses_key_prefix():
    assert fallback_name("abcdefghijkl") == "GsConn-abcdefgh"
    assert fallback_name("abc") == "GsConn-abc"
