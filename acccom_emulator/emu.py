"""
AccCom Emulator - Main Emulator Class

Integrates:
  - CPU registers (cpu/regs.py)
  - Instruction decoder (cpu/decoder.py)
  - Sign-magnitude ALU (cpu/alu.py)
  - Memory image + call stack (mem/)
  - Output sink for PRT/PRC/PRS (periph/sink.py)

Execution model:
  1. Fetch the word at PC
  2. Advance PC by 2 (control transfers simply overwrite it)
  3. Decode opcode + operand into an Instruction
  4. Execute the handler: registers, memory, stack, flags, output
  5. Repeat until a halt, a fault, a breakpoint or the step budget

Termination reasons:
  - HALT:             HLT (opcode $8, any sub-code other than IAC/RET)
  - END:              zero word where an instruction was expected
  - BREAK:            breakpoint address hit
  - TIMEOUT:          max_steps exceeded
  - MEMORY_FAULT:     instruction or operand outside memory
  - STACK_OVERFLOW:   CAL with the stack region full
  - STACK_UNDERFLOW:  RET with nothing to return to
  - ILLEGAL:          undefined opcode ($E, $F)
  - ERROR:            arithmetic fault (register machine DIV by zero)
"""

import logging
from enum import Enum
from typing import Optional, Set

from .cpu.regs import Registers
from .cpu.decoder import decode_opcode, Instruction
from .cpu import alu
from .mem.memory import Memory
from .mem.stack import CallStack
from .periph.sink import IOSink, BufferSink
from .faults import (
    MachineFault, MemoryAccessError, StackOverflow, StackUnderflow,
    IllegalInstruction, DivideByZero,
)
from .loader import ProgramImage, load_program

log = logging.getLogger(__name__)


class StopReason(Enum):
    HALT = 'HALT'
    END = 'END'
    BREAK = 'BREAK'
    TIMEOUT = 'TIMEOUT'
    MEMORY_FAULT = 'MEMORY_FAULT'
    STACK_OVERFLOW = 'STACK_OVERFLOW'
    STACK_UNDERFLOW = 'STACK_UNDERFLOW'
    ILLEGAL = 'ILLEGAL'
    ERROR = 'ERROR'

    @property
    def normal(self) -> bool:
        """True for a clean halt (HLT or end-of-code sentinel)."""
        return self in (StopReason.HALT, StopReason.END)

    @property
    def exit_code(self) -> int:
        """0: normal exit, 1: error exit."""
        return 0 if self.normal or self is StopReason.BREAK else 1


FAULT_REASONS = {
    MemoryAccessError: StopReason.MEMORY_FAULT,
    StackOverflow: StopReason.STACK_OVERFLOW,
    StackUnderflow: StopReason.STACK_UNDERFLOW,
    IllegalInstruction: StopReason.ILLEGAL,
    DivideByZero: StopReason.ERROR,
}


def fault_reason(fault: MachineFault) -> StopReason:
    for cls in type(fault).__mro__:
        if cls in FAULT_REASONS:
            return FAULT_REASONS[cls]
    return StopReason.ERROR


class AccComEmulator:
    """AccCom accumulator machine.

    Usage:
        emu = AccComEmulator()
        emu.load(PROGRAMS['product_sum'])
        result = emu.run()
        print(emu.sink.text)   # "X=-25\\n"
    """

    MEM_SIZE = 0x1000
    STACK_BASE = 0x0000
    STACK_LIMIT = 0x0100
    DEFAULT_MAX_STEPS = 1_000_000

    encode_value = staticmethod(alu.from_int)

    def __init__(self, sink: Optional[IOSink] = None,
                 memory: Optional[Memory] = None):
        self.regs = Registers()
        self.mem = memory if memory is not None else Memory(self.MEM_SIZE)
        self.stack = CallStack(self.mem, self.STACK_BASE, self.STACK_LIMIT)
        self.sink = sink if sink is not None else BufferSink()

        self.image: Optional[ProgramImage] = None
        self.fault: Optional[MachineFault] = None

        self._breakpoints: Set[int] = set()
        self._break_pc: Optional[int] = None   # BREAK address awaiting resume
        self._trace = False
        self._trace_output = []

        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def load(self, program) -> ProgramImage:
        """Clear memory, write the program's DATA and CODE, point PC at entry."""
        self.image = load_program(self.mem, program)
        self.regs.reset()
        self.stack.reset()
        self.fault = None
        self._break_pc = None
        self.regs.PC = self.image.entry
        log.debug("Loaded %s: DATA %s CODE %s entry $%04X",
                  getattr(program, 'name', '<image>'),
                  self.image.data, self.image.code, self.image.entry)
        return self.image

    def dump(self) -> str:
        """DATA and CODE word dumps of the loaded image."""
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
        """Execute one instruction. Returns StopReason if stopped, else None."""
        pc = self.regs.PC

        if not ignore_breakpoints and pc in self._breakpoints and pc != self._break_pc:
            self._break_pc = pc
            return StopReason.BREAK
        self._break_pc = None

        ins: Optional[Instruction] = None
        try:
            ins, next_pc = decode_opcode(self.mem, pc)
            self.regs.PC = next_pc
            self.regs.steps += 1
            self._dispatch[ins.mnemonic](ins)
        except _HaltException as halt:
            self._record(pc, ins)
            return halt.reason
        except MachineFault as e:
            e.pc = pc
            e.ir = ins.word if ins is not None else self._peek(pc)
            return self._fault(e)

        self._record(pc, ins)
        return None

    def run(self, entry: Optional[int] = None,
            max_steps: Optional[int] = None) -> StopReason:
        """Run until termination condition.

        Args:
            entry: start address (default: current PC, set by load())
            max_steps: instruction budget before TIMEOUT

        Returns:
            StopReason indicating why execution stopped
        """
        if entry is not None:
            self.regs.PC = entry
        if max_steps is None:
            max_steps = self.DEFAULT_MAX_STEPS
        self.fault = None

        executed = 0
        try:
            while executed < max_steps:
                # Resuming from BREAK executes the instruction it stopped on
                reason = self.step()
                executed += 1
                if reason is not None:
                    log.info("Stopped: %s at $%04X after %d steps",
                             reason.value, self.regs.PC, self.regs.steps)
                    return reason
        finally:
            self.sink.flush()

        log.warning("Step budget of %d exhausted at $%04X", max_steps, self.regs.PC)
        return StopReason.TIMEOUT

    def _fault(self, fault: MachineFault) -> StopReason:
        self.fault = fault
        log.error(fault.describe())
        if self._trace:
            self._trace_output.append(f"  FAULT: {fault.describe()}")
        return fault_reason(fault)

    def _peek(self, addr: int) -> Optional[int]:
        try:
            return self.mem.read16(addr)
        except MemoryAccessError:
            return None

    def _record(self, pc: int, ins: Instruction):
        if self._trace:
            self._trace_output.append(
                f"${pc:04X}: {str(ins):10s} {self.regs.display()}")

    # ══════════════════════════════════════════════
    # Instruction execution
    # ══════════════════════════════════════════════

    def _build_dispatch(self) -> dict:
        """Build mnemonic -> handler dispatch table."""
        return {
            'END': self._op_end,
            'LDA': self._op_lda,
            'STA': self._op_sta,
            'ADD': self._op_add,
            'SUB': self._op_sub,
            'JMP': self._op_jmp,
            'CAL': self._op_cal,
            'MUL': self._op_mul,
            'IAC': self._op_iac,
            'RET': self._op_ret,
            'HLT': self._op_hlt,
            'BRZ': self._op_brz,
            'BRN': self._op_brn,
            'PRT': self._op_prt,
            'PRC': self._op_prc,
            'PRS': self._op_prs,
        }

    def _operand_word(self, ins: Instruction) -> int:
        return self.mem.read16(ins.operand)

    # ── Load/Store ──

    def _op_lda(self, ins):
        self.regs.load_acc(self._operand_word(ins))

    def _op_sta(self, ins):
        self.mem.write16(ins.operand, self.regs.ACC)

    # ── Arithmetic (flags recomputed) ──

    def _op_add(self, ins):
        self.regs.load_acc(alu.add(self.regs.ACC, self._operand_word(ins)))

    def _op_sub(self, ins):
        self.regs.load_acc(alu.sub(self.regs.ACC, self._operand_word(ins)))

    def _op_mul(self, ins):
        self.regs.load_acc(alu.mul(self.regs.ACC, self._operand_word(ins)))

    def _op_iac(self, ins):
        # Flags keep describing the value before the increment
        self.regs.ACC = alu.inc(self.regs.ACC)

    # ── Control transfer ──

    def _op_jmp(self, ins):
        self.regs.PC = ins.operand

    def _op_cal(self, ins):
        self.stack.push(self.regs.PC)
        self.regs.PC = ins.operand

    def _op_ret(self, ins):
        self.regs.PC = self.stack.pop()

    def _op_brz(self, ins):
        if self.regs.zero:
            self.regs.PC = ins.operand

    def _op_brn(self, ins):
        if self.regs.negative:
            self.regs.PC = ins.operand

    def _op_hlt(self, ins):
        if not ins.canonical:
            log.warning("Halt through unassigned control code $%03X (word $%04X)",
                        ins.operand, ins.word)
        raise _HaltException(StopReason.HALT)

    def _op_end(self, ins):
        raise _HaltException(StopReason.END)

    # ── Output ──

    def _op_prt(self, ins):
        self.sink.emit_number(alu.to_int(self._operand_word(ins)))

    def _op_prc(self, ins):
        self.sink.emit_char(ins.char)

    def _op_prs(self, ins):
        self.sink.emit_string(self.mem.read_cstring(ins.operand))

    # ══════════════════════════════════════════════
    # Breakpoint API
    # ══════════════════════════════════════════════

    def add_breakpoint(self, addr: int):
        """Stop before the instruction at addr executes."""
        self._breakpoints.add(addr & 0xFFFF)

    def remove_breakpoint(self, addr: int):
        self._breakpoints.discard(addr & 0xFFFF)

    def clear_breakpoints(self):
        self._breakpoints.clear()

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Enable instruction trace logging."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def reset(self):
        """Reset registers, stack and debug state. Memory is left alone."""
        self.regs.reset()
        self.stack.reset()
        self.fault = None
        self._breakpoints.clear()
        self._break_pc = None
        self._trace_output.clear()


def run(memory: Memory, entry: int, sink: Optional[IOSink] = None,
        max_steps: Optional[int] = None) -> StopReason:
    """Run a prepared memory image from entry.

    The memory is used in place; the caller keeps ownership and can
    inspect it afterwards.
    """
    emu = AccComEmulator(sink=sink, memory=memory)
    return emu.run(entry=entry, max_steps=max_steps)


# Internal exception for flow control
class _HaltException(Exception):
    def __init__(self, reason: StopReason):
        super().__init__(reason.value)
        self.reason = reason
