"""Tests for word sources."""
import random
from types import SimpleNamespace

import pytest

from passwordle.core.config import DEFAULT_WORDS_PATH
from passwordle.core.exceptions import NoWordAvailableError
from passwordle.services.word_source import (
    DEFAULT_SECRET_ALPHABET,
    SALT_LENGTH,
    HashedSecretSource,
    RandomSecretSource,
    WordListSource,
    create_word_source,
    salted_digest,
)


class TestWordListSource:

    def test_groups_by_length(self):
        source = WordListSource(["crane", "bake", "rocket", "slate"])
        assert source.lengths == [4, 5, 6]
        assert len(source) == 4

    def test_choose_returns_word_of_requested_length(self):
        source = WordListSource(["crane", "slate", "bake"], rng=random.Random(3))
        for _ in range(20):
            assert source.choose(5) in {"CRANE", "SLATE"}

    def test_seeded_selection_is_deterministic(self):
        words = ["crane", "slate", "trace", "plant", "ocean"]
        a = WordListSource(words, rng=random.Random(42))
        b = WordListSource(words, rng=random.Random(42))
        assert [a.choose(5) for _ in range(10)] == [b.choose(5) for _ in range(10)]

    def test_no_word_of_length(self):
        source = WordListSource(["crane"])
        with pytest.raises(NoWordAvailableError) as exc_info:
            source.choose(7)
        assert exc_info.value.details["word_length"] == 7
        assert exc_info.value.http_status == 422

    def test_skips_duplicates_and_non_alpha(self):
        source = WordListSource(["crane", "CRANE", " crane ", "cr4ne", "", "o'er"])
        assert len(source) == 1

    def test_normalize_uppercases_and_strips(self):
        source = WordListSource(["crane"])
        assert source.normalize("  trace\n") == "TRACE"

    def test_contains(self):
        source = WordListSource(["crane"])
        assert "crane" in source
        assert "slate" not in source
        assert 5 not in source

    def test_words_are_immutable(self):
        source = WordListSource(["crane"])
        with pytest.raises(TypeError):
            source._by_length[5] = ("SLATE",)

    def test_from_file_skips_comments(self, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("# header\ncrane\n\nslate\n", encoding="utf-8")
        source = WordListSource.from_file(path)
        assert len(source) == 2

    def test_from_file_empty_raises(self, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("# nothing here\n", encoding="utf-8")
        with pytest.raises(RuntimeError):
            WordListSource.from_file(path)

    def test_packaged_word_list(self):
        source = WordListSource.from_file(DEFAULT_WORDS_PATH)
        assert 5 in source.lengths
        for word in ("CRANE", "TRACE", "SPEED", "ERASE"):
            assert word in source


class TestRandomSecretSource:

    def test_secret_length_and_alphabet(self):
        source = RandomSecretSource()
        secret = source.choose(8)
        assert len(secret) == 8
        assert set(secret) <= set(DEFAULT_SECRET_ALPHABET)

    def test_custom_alphabet_deduplicated(self):
        source = RandomSecretSource(alphabet="aabbc")
        assert source.alphabet == "abc"

    def test_seeded_rng(self):
        a = RandomSecretSource(rng=random.Random(5))
        b = RandomSecretSource(rng=random.Random(5))
        assert a.choose(8) == b.choose(8)

    @pytest.mark.parametrize("length", [0, 65])
    def test_out_of_range_length(self, length):
        with pytest.raises(NoWordAvailableError):
            RandomSecretSource().choose(length)

    def test_normalize_keeps_case(self):
        assert RandomSecretSource().normalize(" aB3x ") == "aB3x"

    def test_empty_alphabet_rejected(self):
        with pytest.raises(ValueError):
            RandomSecretSource(alphabet="")

    @pytest.mark.parametrize("alphabet", ["ab c", "abc\t", "\nxyz"])
    def test_whitespace_in_alphabet_rejected(self, alphabet):
        with pytest.raises(ValueError):
            RandomSecretSource(alphabet=alphabet)

    def test_plain_secrets_have_no_salt(self):
        assert RandomSecretSource().new_salt() is None
        assert WordListSource(["crane"]).new_salt() is None


class TestSaltedDigest:

    def test_known_md5_vector(self):
        # md5("") = d41d8cd98f00b204e9800998ecf8427e
        assert salted_digest("", "") == "1B2M2Y8AsgTpgAmY7PhCfg=="

    def test_salt_is_appended(self):
        assert salted_digest("pass", "word") == salted_digest("passw", "ord")
        assert salted_digest("pass", "word") != salted_digest("word", "pass")

    def test_digest_length(self):
        assert len(salted_digest("aB3xY9zQ", "s4lTs4lT")) == 24


class TestHashedSecretSource:

    def test_salt_length_and_alphabet(self):
        salt = HashedSecretSource().new_salt()
        assert len(salt) == SALT_LENGTH
        assert set(salt) <= set(DEFAULT_SECRET_ALPHABET)

    def test_salts_differ_per_session(self):
        source = HashedSecretSource()
        assert len({source.new_salt() for _ in range(20)}) == 20

    def test_password_uses_alphabet(self):
        source = HashedSecretSource(alphabet="01")
        password = source.choose(8)
        assert len(password) == 8
        assert set(password) <= {"0", "1"}

    def test_seeded_rng(self):
        a = HashedSecretSource(rng=random.Random(9))
        b = HashedSecretSource(rng=random.Random(9))
        assert (a.choose(8), a.new_salt()) == (b.choose(8), b.new_salt())

    def test_normalize_keeps_case(self):
        assert HashedSecretSource().normalize(" aB3xY9zQ ") == "aB3xY9zQ"

    def test_invalid_salt_length(self):
        with pytest.raises(ValueError):
            HashedSecretSource(salt_length=0)


class TestCreateWordSource:

    def test_wordlist(self):
        config = SimpleNamespace(
            WORD_SOURCE="wordlist", WORDS_PATH=str(DEFAULT_WORDS_PATH), SECRET_ALPHABET=""
        )
        assert isinstance(create_word_source(config), WordListSource)

    def test_random(self):
        config = SimpleNamespace(
            WORD_SOURCE="random", WORDS_PATH="", SECRET_ALPHABET="xyz"
        )
        source = create_word_source(config)
        assert isinstance(source, RandomSecretSource)
        assert source.alphabet == "xyz"

    def test_unknown_falls_back_to_wordlist(self):
        config = SimpleNamespace(
            WORD_SOURCE="dictionary", WORDS_PATH=str(DEFAULT_WORDS_PATH), SECRET_ALPHABET=""
        )
        assert isinstance(create_word_source(config), WordListSource)

    def test_hashed(self):
        config = SimpleNamespace(
            WORD_SOURCE="hashed", WORDS_PATH="", SECRET_ALPHABET=""
        )
        source = create_word_source(config)
        assert isinstance(source, HashedSecretSource)
        assert source.alphabet == DEFAULT_SECRET_ALPHABET

    def test_whitespace_alphabet_from_config_rejected(self):
        config = SimpleNamespace(
            WORD_SOURCE="random", WORDS_PATH="", SECRET_ALPHABET="abc def"
        )
        with pytest.raises(ValueError):
            create_word_source(config)
