"""
AccCom Emulator - Machine Fault Hierarchy

Every fatal condition the engine can hit is raised as a MachineFault
subclass at the point of violation. The emulator's step() is the only
place that catches them; it fills in the faulting instruction address
and word, records the fault and turns it into a StopReason.
"""

from typing import Optional


class MachineFault(Exception):
    """Base class for fatal execution errors."""

    def __init__(self, message: str, addr: Optional[int] = None):
        super().__init__(message)
        self.addr = addr          # memory address involved, if any
        self.pc: Optional[int] = None   # address of the faulting instruction
        self.ir: Optional[int] = None   # faulting instruction word

    def describe(self) -> str:
        where = f"${self.pc:04X}" if self.pc is not None else "?"
        word = f"${self.ir:04X}" if self.ir is not None else "????"
        return f"{type(self).__name__} at {where} (IR={word}): {self}"


class MemoryAccessError(MachineFault):
    """Byte or word access outside the memory image."""


class StackOverflow(MachineFault):
    """CAL with the reserved stack region full."""


class StackUnderflow(MachineFault):
    """RET with no pending call."""


class IllegalInstruction(MachineFault):
    """Opcode not defined by the instruction set."""


class DivideByZero(MachineFault):
    """Register machine DIV with a zero divisor."""
