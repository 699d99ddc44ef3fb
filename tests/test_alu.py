"""
ALU Tests for the AccCom sign-magnitude number format.

Encoding, decoding, the arithmetic helpers and the (zero, negative)
flag pair.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from acccom_emulator.cpu import alu


class TestSignMagnitudeCodec:

    def test_known_encodings(self):
        cases = [
            (0,       0x0000),
            (7,       0x0007),
            (-5,      0x8005),
            (-25,     0x8019),
            (32767,   0x7FFF),
            (-32767,  0xFFFF),
        ]
        for value, word in cases:
            assert alu.from_int(value) == word, f"{value}: expected {word:04X}"
            assert alu.to_int(word) == value

    def test_round_trip_full_range(self):
        for value in range(alu.MIN_VALUE, alu.MAX_VALUE + 1):
            assert alu.to_int(alu.from_int(value)) == value

    def test_negative_zero_collapses(self):
        assert alu.from_int(-0) == 0x0000
        # A stray $8000 still reads back as zero
        assert alu.to_int(0x8000) == 0

    def test_no_bit_inversion(self):
        """-1 is $8001, not the two's complement $FFFF."""
        assert alu.from_int(-1) == 0x8001
        assert alu.to_int(0xFFFF) == -32767

    def test_overflow_wraps_magnitude(self):
        assert alu.from_int(32768) == 0x0000
        assert alu.from_int(32769) == 0x0001
        assert alu.from_int(-32769) == 0x8001


class TestArithmetic:

    def test_add(self):
        assert alu.add(alu.from_int(-35), alu.from_int(10)) == alu.from_int(-25)

    def test_sub_crosses_zero(self):
        assert alu.sub(alu.from_int(3), alu.from_int(5)) == 0x8002

    def test_sub_to_zero_is_positive_zero(self):
        assert alu.sub(0x8004, 0x8004) == 0x0000

    def test_mul_signs(self):
        assert alu.mul(alu.from_int(7), alu.from_int(-5)) == alu.from_int(-35)
        assert alu.mul(alu.from_int(-7), alu.from_int(-5)) == alu.from_int(35)

    def test_mul_overflow_wraps(self):
        # 200 * 200 = 40000, magnitude masked to 15 bits
        assert alu.to_int(alu.mul(alu.from_int(200), alu.from_int(200))) == 40000 & 0x7FFF

    def test_inc(self):
        assert alu.inc(alu.from_int(-1)) == 0x0000
        assert alu.inc(alu.from_int(41)) == alu.from_int(42)


class TestFlags:

    def test_zero(self):
        assert alu.test_zn(0x0000) == (True, False)
        assert alu.test_zn(0x8000) == (True, False)

    def test_negative(self):
        assert alu.test_zn(0x8005) == (False, True)

    def test_positive(self):
        assert alu.test_zn(0x0005) == (False, False)

    def test_never_both(self):
        for word in (0x0000, 0x8000, 0x0001, 0x8001, 0x7FFF, 0xFFFF):
            zero, negative = alu.test_zn(word)
            assert not (zero and negative)
