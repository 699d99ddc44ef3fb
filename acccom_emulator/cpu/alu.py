"""
AccCom Emulator - Sign-Magnitude Codec + ALU

AccCom numbers are 16-bit sign-magnitude words, NOT two's complement:
  bit 15     sign (1 = negative)
  bits 14-0  magnitude

Converting to a host int negates the magnitude when the sign bit is set;
bits are never inverted. The representable range is symmetric,
-32767..+32767, and both +0 and -0 encode as $0000 because abs(0) is 0.
Magnitudes wider than 15 bits wrap silently on encode (inherited quirk).

Arithmetic functions take and return raw words. Flag derivation is kept
separate (test_zn) so callers decide when flags are recomputed: LDA, ADD,
SUB and MUL recompute them, IAC does not.
"""

SIGN_BIT = 0x8000
MAGNITUDE_MASK = 0x7FFF
WORD_MASK = 0xFFFF

MAX_VALUE = MAGNITUDE_MASK
MIN_VALUE = -MAGNITUDE_MASK


def to_int(word: int) -> int:
    """Decode a sign-magnitude word into a host int."""
    magnitude = word & MAGNITUDE_MASK
    return -magnitude if word & SIGN_BIT else magnitude


def from_int(value: int) -> int:
    """Encode a host int as a sign-magnitude word.

    abs(value) is masked to 15 bits, so out-of-range values wrap
    instead of raising. Zero of either sign encodes as $0000.
    """
    sign = SIGN_BIT if value < 0 else 0
    return sign | (abs(value) & MAGNITUDE_MASK)


# ══════════════════════════════════════════════
# Arithmetic on words
# ══════════════════════════════════════════════

def add(acc: int, operand: int) -> int:
    return from_int(to_int(acc) + to_int(operand))


def sub(acc: int, operand: int) -> int:
    return from_int(to_int(acc) - to_int(operand))


def mul(acc: int, operand: int) -> int:
    return from_int(to_int(acc) * to_int(operand))


def inc(acc: int) -> int:
    """IAC: increment by one."""
    return from_int(to_int(acc) + 1)


# ══════════════════════════════════════════════
# Flags
# ══════════════════════════════════════════════

def test_zn(word: int) -> tuple:
    """Return (zero, negative) for a sign-magnitude word.

    zero     magnitude is exactly 0 (a stray $8000 counts as zero)
    negative decoded value < 0
    The two never hold together.
    """
    value = to_int(word)
    return (value == 0, value < 0)
