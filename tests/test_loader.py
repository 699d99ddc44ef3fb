"""
Loader and Input Provider Tests.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from acccom_emulator.emu import AccComEmulator, StopReason
from acccom_emulator.loader import (
    Region, load_program, load_image, seed, input_number, parse_int, parse_assignment,
)
from acccom_emulator.mem.memory import Memory
from acccom_emulator.programs import Program, PRODUCT_SUM
from acccom_emulator.faults import MemoryAccessError


class TestLoadProgram:

    def test_regions(self):
        image = load_program(Memory(), PRODUCT_SUM)
        assert image.data == Region(0x100, 0x10C)
        assert image.code == Region(0x200, 0x210)
        assert image.entry == 0x200
        assert str(image.code) == "$0200-$0210"

    def test_clears_previous_contents(self):
        mem = Memory()
        mem.write16(0x0800, 0xBEEF)
        load_program(mem, PRODUCT_SUM)
        assert mem.read16(0x0800) == 0
        # Word after the last CODE word is the END sentinel
        assert mem.read16(0x210) == 0

    def test_code_that_does_not_fit(self):
        prog = Program(name='big', description='', data_base=0x100, data=(),
                       code_base=0x0FFE, code=(0x8000, 0x8000))
        with pytest.raises(MemoryAccessError):
            load_program(Memory(), prog)

    def test_region_contains(self):
        r = Region(0x100, 0x104)
        assert r.contains(0x102)
        assert not r.contains(0x104)
        assert r.size == 4


class TestLoadImage:

    def test_raw_binary(self, tmp_path):
        path = tmp_path / "prog.bin"
        path.write_bytes(bytes([0xC0, 0x41, 0x80, 0x00]))   # PRC 'A'; HLT
        emu = AccComEmulator()
        emu.image = load_image(emu.mem, path, base=0x300)
        assert emu.image.entry == 0x300
        assert emu.image.data.size == 0
        assert emu.run(entry=emu.image.entry) == StopReason.HALT
        assert emu.sink.text == "A"

    def test_explicit_entry(self, tmp_path):
        path = tmp_path / "prog.bin"
        path.write_bytes(bytes(4))
        image = load_image(Memory(), path, base=0x200, entry=0x202)
        assert image.entry == 0x202

    def test_image_too_large(self, tmp_path):
        path = tmp_path / "prog.bin"
        path.write_bytes(bytes(0x20))
        with pytest.raises(MemoryAccessError):
            load_image(Memory(), path, base=0x0FF0)


class TestInput:

    def test_seed_sign_magnitude(self):
        mem = Memory()
        seed(mem, {0x100: 7, 0x102: -5})
        assert mem.read16(0x100) == 0x0007
        assert mem.read16(0x102) == 0x8005

    def test_seed_custom_encoding(self):
        mem = Memory()
        seed(mem, {0x100: -1}, encode=lambda v: v & 0xFFFF)
        assert mem.read16(0x100) == 0xFFFF

    def test_input_number(self):
        mem = Memory()
        prompts = []

        def reader(prompt):
            prompts.append(prompt)
            return " -12 \n"

        assert input_number(mem, 0x104, "C = ", reader=reader) == -12
        assert prompts == ["C = "]
        assert mem.read16(0x104) == 0x800C

    def test_input_not_a_number(self):
        with pytest.raises(ValueError):
            input_number(Memory(), 0x100, "A = ", reader=lambda p: "seven")

    def test_input_end_of_file(self):
        def reader(prompt):
            raise EOFError

        with pytest.raises(ValueError, match="end of input"):
            input_number(Memory(), 0x100, "A = ", reader=reader)


class TestParsing:

    def test_parse_int(self):
        cases = [
            ("7",       7),
            ("-5",      -5),
            ("+3",      3),
            ("0x100",   0x100),
            ("0X1F",    0x1F),
            ("$102",    0x102),
            ("-0x10",   -16),
            (" 42 ",    42),
        ]
        for text, value in cases:
            assert parse_int(text) == value, text

    def test_parse_int_rejects_garbage(self):
        for text in ("", "0xZZ", "ten"):
            with pytest.raises(ValueError):
                parse_int(text)

    def test_parse_assignment(self):
        assert parse_assignment("0x100=7") == (0x100, 7)
        assert parse_assignment("$102=-5") == (0x102, -5)

    def test_parse_assignment_needs_equals(self):
        with pytest.raises(ValueError):
            parse_assignment("0x100")
