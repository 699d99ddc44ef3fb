"""
picoMIPS Emulator - Register Machine Variant

A separate engine for the small register-based machine. It shares the
memory model, loader and stop-reason conventions with the AccCom
emulator but has its own decoder and dispatch; the two instruction
sets are never mixed.

Machine model:
  r0-r7  16-bit general registers, two's complement
  PC     byte address of the next instruction (+2 per fetch)
  memory 64 KiB, big-endian words

Encoding (one 16-bit word):
  R-type  0000 sss ttt ddd fff     rd = rs <fn> rt
          fn: 0 and, 1 or, 2 add, 3 sub, 4 mul, 5 div
  I-type  oooo sss ttt iiiiii      imm is unsigned 6-bit
          $1 beq   pc += imm*2 if rs == rt
          $4 lw    rt = mem[rs + imm*2]
          $5 sw    mem[rs + imm*2] = rt
          $A addi  rt = rs + imm
          $B subi  rt = rs - imm
  J-type  0011 oooooooooooo        pc += offset*2, 12-bit signed offset
  $F000   halt
"""

import logging
from typing import Optional, Set

from ..mem.memory import Memory
from ..faults import MachineFault, IllegalInstruction, DivideByZero
from ..loader import ProgramImage, load_program
from ..emu import StopReason, fault_reason

log = logging.getLogger(__name__)

REG_COUNT = 8
WORD_MASK = 0xFFFF


def to_word(value: int) -> int:
    """Host int -> 16-bit two's complement word."""
    return value & WORD_MASK


def to_signed(word: int) -> int:
    """16-bit word -> signed host int."""
    word &= WORD_MASK
    return word - 0x10000 if word & 0x8000 else word


def sign_extend(value: int, bits: int) -> int:
    mask = (1 << bits) - 1
    value &= mask
    if value & (1 << (bits - 1)):
        value -= (1 << bits)
    return value


def _div(a: int, b: int) -> int:
    if b == 0:
        raise DivideByZero("Division by zero")
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


# fn -> (mnemonic, operation on signed ints)
R_FUNCTIONS = {
    0: ('and', lambda a, b: a & b),
    1: ('or',  lambda a, b: a | b),
    2: ('add', lambda a, b: a + b),
    3: ('sub', lambda a, b: a - b),
    4: ('mul', lambda a, b: a * b),
    5: ('div', _div),
}

I_OPCODES = {
    0x1: 'beq',
    0x3: 'j',
    0x4: 'lw',
    0x5: 'sw',
    0xA: 'addi',
    0xB: 'subi',
    0xF: 'halt',
}


def disassemble(word: int) -> str:
    op = (word >> 12) & 0xF
    rs, rt, rd = (word >> 9) & 7, (word >> 6) & 7, (word >> 3) & 7
    imm = word & 0x3F
    if op == 0:
        fn = word & 7
        if fn not in R_FUNCTIONS:
            return f".word ${word:04X}"
        return f"{R_FUNCTIONS[fn][0]} r{rd}, r{rs}, r{rt}"
    mnem = I_OPCODES.get(op)
    if mnem is None:
        return f".word ${word:04X}"
    if mnem == 'halt':
        return mnem
    if mnem == 'j':
        return f"j {sign_extend(word, 12):+d}"
    if mnem in ('lw', 'sw'):
        return f"{mnem} r{rt}, {imm}(r{rs})"
    return f"{mnem} r{rt}, r{rs}, {imm}"


class PicoRegisters:
    """picoMIPS register file + PC."""

    __slots__ = ('r', 'PC', 'steps')

    def __init__(self):
        self.r = [0] * REG_COUNT
        self.PC = 0
        self.steps = 0

    def __getitem__(self, n: int) -> int:
        return self.r[n]

    def __setitem__(self, n: int, value: int):
        self.r[n] = to_word(value)

    def display(self) -> str:
        return ' '.join(f"r{i}={v:04X}({to_signed(v)})" for i, v in enumerate(self.r))

    def reset(self):
        self.r = [0] * REG_COUNT
        self.PC = 0
        self.steps = 0


class PicoMIPSEmulator:
    """picoMIPS register machine.

    Usage:
        emu = PicoMIPSEmulator()
        emu.load(PROGRAMS['pico_sum_squares'])
        emu.run()
        emu.mem.read16(0x0104)   # 20000
    """

    MEM_SIZE = 0x10000
    DEFAULT_MAX_STEPS = 1_000_000

    encode_value = staticmethod(to_word)

    def __init__(self, memory: Optional[Memory] = None):
        self.regs = PicoRegisters()
        self.mem = memory if memory is not None else Memory(self.MEM_SIZE)
        self.image: Optional[ProgramImage] = None
        self.fault: Optional[MachineFault] = None
        self._breakpoints: Set[int] = set()
        self._break_pc: Optional[int] = None   # BREAK address awaiting resume
        self._trace = False
        self._trace_output = []

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def load(self, program) -> ProgramImage:
        self.image = load_program(self.mem, program)
        self.regs.reset()
        self.fault = None
        self._break_pc = None
        self.regs.PC = self.image.entry
        return self.image

    def dump(self) -> str:
        if self.image is None:
            return ''
        parts = []
        for name, region in (('DATA', self.image.data), ('CODE', self.image.code)):
            if region.size:
                parts.append(self.mem.dump_words(name, region.begin, region.end))
        return '\n'.join(parts)

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self, ignore_breakpoints: bool = False) -> Optional[StopReason]:
        pc = self.regs.PC
        if not ignore_breakpoints and pc in self._breakpoints and pc != self._break_pc:
            self._break_pc = pc
            return StopReason.BREAK
        self._break_pc = None

        ir = None
        before = list(self.regs.r)
        try:
            ir = self.mem.read16(pc)
            self.regs.PC = (pc + 2) & WORD_MASK
            self.regs.steps += 1
            halted = self._execute(ir)
        except MachineFault as e:
            e.pc = pc
            e.ir = ir
            self.fault = e
            log.error(e.describe())
            return fault_reason(e)

        if self._trace:
            changed = [f"r{i}: {old:04X} => {new:04X} ({to_signed(new)})"
                       for i, (old, new) in enumerate(zip(before, self.regs.r))
                       if old != new]
            self._trace_output.append(
                f"${pc:04X}: {disassemble(ir):20s} {'; '.join(changed)}".rstrip())
        return StopReason.HALT if halted else None

    def run(self, entry: Optional[int] = None,
            max_steps: Optional[int] = None) -> StopReason:
        if entry is not None:
            self.regs.PC = entry
        if max_steps is None:
            max_steps = self.DEFAULT_MAX_STEPS
        self.fault = None

        for _ in range(max_steps):
            reason = self.step()
            if reason is not None:
                log.info("Stopped: %s at $%04X after %d steps",
                         reason.value, self.regs.PC, self.regs.steps)
                return reason

        log.warning("Step budget of %d exhausted at $%04X", max_steps, self.regs.PC)
        return StopReason.TIMEOUT

    def _ea(self, base: int, imm: int) -> int:
        return (base + imm * 2) & WORD_MASK

    def _execute(self, ir: int) -> bool:
        """Execute one word. Returns True on halt."""
        regs = self.regs
        op = (ir >> 12) & 0xF
        rs, rt = (ir >> 9) & 7, (ir >> 6) & 7
        imm = ir & 0x3F

        if op == 0x0:
            fn = ir & 7
            if fn not in R_FUNCTIONS:
                raise IllegalInstruction(f"Undefined R-type function {fn}")
            rd = (ir >> 3) & 7
            regs[rd] = R_FUNCTIONS[fn][1](to_signed(regs[rs]), to_signed(regs[rt]))
        elif op == 0xF:
            return True
        elif op == 0xA:
            regs[rt] = regs[rs] + imm
        elif op == 0xB:
            regs[rt] = regs[rs] - imm
        elif op == 0x4:
            regs[rt] = self.mem.read16(self._ea(regs[rs], imm))
        elif op == 0x5:
            self.mem.write16(self._ea(regs[rs], imm), regs[rt])
        elif op == 0x1:
            if regs[rs] == regs[rt]:
                regs.PC = (regs.PC + imm * 2) & WORD_MASK
        elif op == 0x3:
            regs.PC = (regs.PC + sign_extend(ir, 12) * 2) & WORD_MASK
        else:
            raise IllegalInstruction(f"Undefined opcode ${op:X} in word ${ir:04X}")
        return False

    # ══════════════════════════════════════════════
    # Breakpoint / trace API
    # ══════════════════════════════════════════════

    def add_breakpoint(self, addr: int):
        self._breakpoints.add(addr & WORD_MASK)

    def clear_breakpoints(self):
        self._breakpoints.clear()
        self._break_pc = None

    def enable_trace(self, enable: bool = True):
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def reset(self):
        self.regs.reset()
        self.fault = None
        self._breakpoints.clear()
        self._trace_output.clear()
