"""
picoMIPS Register Machine Tests.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from acccom_emulator.pico import PicoMIPSEmulator
from acccom_emulator.pico.emu import disassemble, sign_extend, to_signed
from acccom_emulator.emu import StopReason
from acccom_emulator.loader import seed
from acccom_emulator.programs import Program, PICO_SUM_SQUARES
from acccom_emulator.faults import DivideByZero


def _emu(code, data=()):
    emu = PicoMIPSEmulator()
    emu.load(Program(name='t', description='', data_base=0x100, data=tuple(data),
                     code_base=0x200, code=tuple(code), machine='picomips'))
    return emu


class TestSumSquares:

    def test_default_inputs(self):
        emu = PicoMIPSEmulator()
        emu.load(PICO_SUM_SQUARES)
        assert emu.run() == StopReason.HALT
        assert emu.mem.read16(0x104) == 20000
        assert emu.regs[0] == 0x0100

    def test_seeded_twos_complement(self):
        emu = PicoMIPSEmulator()
        emu.load(PICO_SUM_SQUARES)
        seed(emu.mem, {0x100: -3, 0x102: 4}, encode=emu.encode_value)
        assert emu.mem.read16(0x100) == 0xFFFD
        emu.run()
        assert emu.mem.read16(0x104) == 25


class TestInstructions:

    def test_addi_subi(self):
        emu = _emu([0xA005,    # addi r0, r0, 5
                    0xB042,    # subi r1, r0, 2
                    0xF000])
        emu.run()
        assert emu.regs[0] == 5
        assert emu.regs[1] == 3

    def test_sub_wraps_to_twos_complement(self):
        emu = _emu([0xB001,    # subi r0, r0, 1
                    0xF000])
        emu.run()
        assert emu.regs[0] == 0xFFFF
        assert to_signed(emu.regs[0]) == -1

    def test_div_truncates_toward_zero(self):
        emu = _emu([0xB007,    # subi r0, r0, 7     r0 = -7
                    0xA242,    # addi r1, r1, 2     r1 = 2
                    0x0055,    # div  r2, r0, r1
                    0xF000])
        emu.run()
        assert to_signed(emu.regs[2]) == -3

    def test_div_by_zero(self):
        emu = _emu([0xA005,    # addi r0, r0, 5
                    0x0055,    # div  r2, r0, r1    r1 = 0
                    0xF000])
        assert emu.run() == StopReason.ERROR
        assert isinstance(emu.fault, DivideByZero)
        assert emu.fault.pc == 0x202

    def test_beq_skips_forward(self):
        emu = _emu([0x1001,    # beq r0, r0, 1      skip next word
                    0xA001,    # addi r0, r0, 1
                    0xA042,    # addi r1, r0, 2
                    0xF000])
        emu.run()
        assert emu.regs[0] == 0
        assert emu.regs[1] == 2

    def test_jump_backwards(self):
        emu = _emu([0xA001,    # $200 addi r0, r0, 1
                    0x3FFE,    # $202 j -2          back to $200
                    0xF000])
        assert emu.run(max_steps=10) == StopReason.TIMEOUT
        assert emu.regs[0] == 5

    def test_lw_sw(self):
        emu = _emu([0xA010,    # addi r0, r0, 16
                    0x0004,    # mul  r0, r0, r0    r0 = $100
                    0x4040,    # lw   r1, 0(r0)
                    0x5041,    # sw   r1, 1(r0)
                    0xF000],
                   data=[0x1234, 0x0000])
        emu.run()
        assert emu.mem.read16(0x102) == 0x1234

    def test_undefined_opcode(self):
        emu = _emu([0x2000])
        assert emu.run() == StopReason.ILLEGAL
        assert emu.fault.ir == 0x2000


class TestDisassembly:

    def test_forms(self):
        assert disassemble(0x025C) == "mul r3, r1, r1"
        assert disassemble(0x4081) == "lw r2, 1(r0)"
        assert disassemble(0xA010) == "addi r0, r0, 16"
        assert disassemble(0x3FFE) == "j -2"
        assert disassemble(0xF000) == "halt"
        assert disassemble(0x0007) == ".word $0007"

    def test_sign_extend(self):
        assert sign_extend(0xFFE, 12) == -2
        assert sign_extend(0x7FF, 12) == 2047

    def test_trace_shows_register_changes(self):
        emu = _emu([0xA005, 0xF000])
        emu.enable_trace()
        emu.run()
        first = emu.get_trace().splitlines()[0]
        assert first.startswith("$0200: addi r0, r0, 5")
        assert "r0: 0000 => 0005 (5)" in first


class TestBreakpoints:

    def test_breakpoint_on_entry(self):
        emu = _emu([0xA005, 0xF000])    # addi r0, r0, 5; halt
        emu.add_breakpoint(0x200)
        assert emu.run() == StopReason.BREAK
        assert emu.regs[0] == 0
        assert emu.run() == StopReason.HALT
        assert emu.regs[0] == 5
