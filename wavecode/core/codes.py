"""Random wave code generation and code-to-pattern mapping."""

from __future__ import annotations

import secrets

from wavecode.errors import ErrorCode, WaveCodeError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
CODE_LENGTH = 6
BARS_PER_CHARACTER = 4
PATTERN_LENGTH = CODE_LENGTH * BARS_PER_CHARACTER
MAX_ORDINAL = len(ALPHABET) - 1

# (scale, offset) per bar; a character's four bars are min(1, n * scale + offset).
BAR_TRANSFORMS: tuple[tuple[float, float], ...] = (
    (0.8, 0.2),
    (1.1, 0.1),
    (0.95, 0.15),
    (0.85, 0.2),
)

_ORDINALS: dict[str, int] = {ch: i for i, ch in enumerate(ALPHABET)}


def generate_code() -> str:
    """Return a code of uniformly random alphabet symbols from the OS CSPRNG."""
    return "".join(secrets.choice(ALPHABET) for _ in range(CODE_LENGTH))


def generate_unique_code_set(count: int) -> set[str]:
    """Return exactly ``count`` distinct codes, redrawing on in-batch collisions."""
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    codes: set[str] = set()
    while len(codes) < count:
        codes.add(generate_code())
    return codes


def is_valid_format(value: object) -> bool:
    """Return True when ``value`` is a code after uppercasing."""
    if not isinstance(value, str):
        return False
    # Some characters grow when uppercased ("ß" -> "SS"), so measure afterwards.
    upper = value.upper()
    return len(upper) == CODE_LENGTH and all(ch in _ORDINALS for ch in upper)


def normalize_code(value: str) -> str:
    """Uppercase and check a code, raising WaveCodeError when malformed."""
    if not is_valid_format(value):
        raise WaveCodeError(
            ErrorCode.CODE_INVALID_FORMAT,
            details={"code": repr(value)},
        )
    return value.upper()


def code_to_ordinal(code: str) -> list[int]:
    """Map each character to its alphabet index: A-Z -> 0-25, 0-9 -> 26-35."""
    return [_ORDINALS[ch] for ch in normalize_code(code)]


def code_to_wave_pattern(code: str) -> list[float]:
    """Derive the 24 normalized bar amplitudes for ``code``.

    Each character contributes four bars, one per entry of BAR_TRANSFORMS,
    applied to ``ordinal / 35``. The result depends only on the characters,
    so regenerating an image for the same code always yields the same bars.
    """
    bars: list[float] = []
    for ordinal in code_to_ordinal(code):
        normalized = ordinal / MAX_ORDINAL
        for scale, offset in BAR_TRANSFORMS:
            bars.append(min(1.0, normalized * scale + offset))
    return bars
