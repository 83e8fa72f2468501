"""Tests for wavecode.core.codes."""

from __future__ import annotations

import re

import pytest

from wavecode.core.codes import (
    ALPHABET,
    PATTERN_LENGTH,
    code_to_ordinal,
    code_to_wave_pattern,
    generate_code,
    generate_unique_code_set,
    is_valid_format,
    normalize_code,
)
from wavecode.errors import ErrorCode, WaveCodeError

_CODE_RE = re.compile(r"^[A-Z0-9]{6}$")


class TestGenerateCode:
    def test_matches_format(self):
        for _ in range(200):
            assert _CODE_RE.match(generate_code())

    def test_successive_codes_are_distinct(self):
        codes = {generate_code() for _ in range(100)}
        assert len(codes) == 100

    def test_uses_secrets_choice(self, monkeypatch):
        calls: list[str] = []

        def fake_choice(seq):
            calls.append(seq)
            return "Q"

        monkeypatch.setattr("wavecode.core.codes.secrets.choice", fake_choice)
        assert generate_code() == "QQQQQQ"
        assert calls == [ALPHABET] * 6


class TestGenerateUniqueCodeSet:
    def test_returns_exact_count(self):
        codes = generate_unique_code_set(250)
        assert len(codes) == 250
        assert all(_CODE_RE.match(code) for code in codes)

    def test_zero_count(self):
        assert generate_unique_code_set(0) == set()

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            generate_unique_code_set(-1)

    def test_retries_on_collision(self, monkeypatch):
        draws = iter(["AAAAAA", "AAAAAA", "BBBBBB", "AAAAAA", "CCCCCC"])
        monkeypatch.setattr("wavecode.core.codes.generate_code", lambda: next(draws))
        assert generate_unique_code_set(3) == {"AAAAAA", "BBBBBB", "CCCCCC"}


class TestIsValidFormat:
    @pytest.mark.parametrize("value", ["ABC123", "ZZZZZZ", "000000", "abc123"])
    def test_accepts(self, value):
        assert is_valid_format(value) is True

    @pytest.mark.parametrize(
        "value",
        ["ABC12", "ABC1234", "ABC12!", "", None, 123456, "ÄBC123", "ABCDEß"],
    )
    def test_rejects(self, value):
        assert is_valid_format(value) is False

    def test_normalize_uppercases(self):
        assert normalize_code("abc123") == "ABC123"

    def test_expanding_uppercase_rejected(self):
        # "ß" uppercases to "SS", which would make a seven character code
        with pytest.raises(WaveCodeError):
            normalize_code("ABCDEß")
        with pytest.raises(WaveCodeError):
            code_to_wave_pattern("ABCDEß")

    def test_normalize_rejects_bad_code(self):
        with pytest.raises(WaveCodeError) as excinfo:
            normalize_code("AB-123")
        assert excinfo.value.code is ErrorCode.CODE_INVALID_FORMAT


class TestCodeToOrdinal:
    def test_letters(self):
        assert code_to_ordinal("ABCXYZ") == [0, 1, 2, 23, 24, 25]

    def test_digits(self):
        assert code_to_ordinal("012789") == [26, 27, 28, 33, 34, 35]

    def test_mixed(self):
        assert code_to_ordinal("A1B2C3") == [0, 27, 1, 28, 2, 29]

    def test_lowercase_normalized(self):
        assert code_to_ordinal("a1b2c3") == [0, 27, 1, 28, 2, 29]

    def test_invalid_raises(self):
        with pytest.raises(WaveCodeError):
            code_to_ordinal("A1B2C")


class TestCodeToWavePattern:
    def test_length_and_bounds(self):
        for code in ("ABC123", "ZZZZZZ", "000000", "999999", "AAAAAA"):
            pattern = code_to_wave_pattern(code)
            assert len(pattern) == PATTERN_LENGTH == 24
            assert all(0.0 <= value <= 1.0 for value in pattern)

    def test_deterministic(self):
        assert code_to_wave_pattern("ABC123") == code_to_wave_pattern("ABC123")
        assert code_to_wave_pattern("abc123") == code_to_wave_pattern("ABC123")

    def test_different_codes_differ(self):
        assert code_to_wave_pattern("ABC123") != code_to_wave_pattern("XYZ789")

    def test_first_letter_uses_offsets_only(self):
        assert code_to_wave_pattern("AAAAAA")[:4] == pytest.approx([0.2, 0.1, 0.15, 0.2])

    def test_top_ordinal_clamps_to_one(self):
        assert code_to_wave_pattern("999999") == [1.0] * 24

    def test_four_transforms_per_character(self):
        normalized = 26 / 35  # "0"
        expected = [
            normalized * 0.8 + 0.2,
            normalized * 1.1 + 0.1,
            normalized * 0.95 + 0.15,
            normalized * 0.85 + 0.2,
        ]
        assert code_to_wave_pattern("0AAAAA")[:4] == pytest.approx(expected)

    def test_second_bar_clamps_before_others(self):
        pattern = code_to_wave_pattern("3AAAAA")  # ordinal 29
        assert pattern[1] == 1.0
        assert pattern[0] < 1.0
