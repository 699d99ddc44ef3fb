"""
AccCom Emulator - CPU Register Set + Flags

Register model:
  ACC   16-bit accumulator, holds a sign-magnitude number
  PC    16-bit byte address of the next instruction word
  zero / negative
        condition flags derived from the last LDA/ADD/SUB/MUL result.
        They are two independent booleans rather than bits OR'd into one
        status word, so BRZ and BRN can never test an ambiguous pattern.
        At most one of them is set; neither set means positive non-zero.
"""

from . import alu


class Registers:
    """AccCom CPU register set."""

    __slots__ = ('ACC', 'PC', 'zero', 'negative', 'steps')

    def __init__(self):
        self.ACC: int = 0         # Accumulator (sign-magnitude)
        self.PC: int = 0          # Program counter
        self.zero: bool = False
        self.negative: bool = False
        self.steps: int = 0       # Instructions executed

    # --- Flag access ---

    def set_flags(self, flags: tuple):
        """Apply a (zero, negative) pair from alu.test_zn()."""
        self.zero, self.negative = flags

    def load_acc(self, word: int):
        """Write ACC and recompute flags from the new value."""
        self.ACC = word & alu.WORD_MASK
        self.set_flags(alu.test_zn(self.ACC))

    @property
    def acc_value(self) -> int:
        """ACC decoded as a host int."""
        return alu.to_int(self.ACC)

    # --- Display ---

    def display(self) -> str:
        """Format register state for traces and dumps."""
        flags = ('Z' if self.zero else '.') + ('N' if self.negative else '.')
        return (f"PC={self.PC:04X} ACC={self.ACC:04X} ({self.acc_value:+d}) "
                f"[{flags}]")

    def reset(self):
        self.ACC = 0
        self.PC = 0
        self.zero = False
        self.negative = False
        self.steps = 0
