"""
AccCom Emulator - Call Stack

Return addresses for CAL/RET live in a reserved low region of memory
($0000-$00FE in the reference layout, 128 slots). The top-of-stack
cursor is kept outside memory and always points at the next free slot:
push writes then advances by 2, pop retreats by 2 then reads.
"""

from ..faults import StackOverflow, StackUnderflow


class CallStack:
    """Push/pop stack of 16-bit return addresses backed by Memory."""

    def __init__(self, memory, base: int = 0x0000, limit: int = 0x0100):
        self.mem = memory
        self.base = base
        self.limit = limit      # exclusive
        self.tos = base         # top-of-stack cursor

    @property
    def depth(self) -> int:
        return (self.tos - self.base) // 2

    @property
    def capacity(self) -> int:
        return (self.limit - self.base) // 2

    def push(self, addr: int):
        if self.tos + 2 > self.limit:
            raise StackOverflow(
                f"Call stack full ({self.capacity} frames)", addr=self.tos)
        self.mem.write16(self.tos, addr & 0xFFFF)
        self.tos += 2

    def pop(self) -> int:
        if self.tos <= self.base:
            raise StackUnderflow("Return with empty call stack", addr=self.tos)
        self.tos -= 2
        return self.mem.read16(self.tos)

    def frames(self) -> list:
        """Pending return addresses, oldest first."""
        return [self.mem.read16(a) for a in range(self.base, self.tos, 2)]

    def reset(self):
        self.tos = self.base
