"""
AccCom Emulator - Flat Memory Image

Reference layout (4096 bytes, 12-bit operands):
  $000-$0FF  Call stack (return addresses, grows upward)
  $100-...   DATA section (variables, constants, strings)
  $200-...   CODE section (instruction words)

Words are 16-bit big-endian: high byte at addr, low byte at addr+1.
Code and data share the address space and nothing stops a program from
overwriting its own code. Every byte access is bounds-checked; touching
a byte outside the image raises MemoryAccessError instead of wrapping.
"""

from typing import Iterable, Union
from pathlib import Path

from ..faults import MemoryAccessError


class Memory:
    """Byte-addressable memory with bounds-checked word access."""

    DEFAULT_SIZE = 0x1000

    def __init__(self, size: int = DEFAULT_SIZE):
        self.size = size
        self._mem = bytearray(size)

    def _check(self, addr: int, length: int = 1):
        if addr < 0 or addr + length > self.size:
            raise MemoryAccessError(
                f"Access to ${addr:04X} (+{length}) outside ${self.size:04X}-byte memory",
                addr=addr)

    # --- Core read/write ---

    def read8(self, addr: int) -> int:
        self._check(addr)
        return self._mem[addr]

    def write8(self, addr: int, value: int):
        self._check(addr)
        self._mem[addr] = value & 0xFF

    def read16(self, addr: int) -> int:
        """Read 16-bit word (big-endian)."""
        self._check(addr, 2)
        return (self._mem[addr] << 8) | self._mem[addr + 1]

    def write16(self, addr: int, value: int):
        """Write 16-bit word (big-endian)."""
        self._check(addr, 2)
        self._mem[addr] = (value >> 8) & 0xFF
        self._mem[addr + 1] = value & 0xFF

    def read_cstring(self, addr: int) -> bytes:
        """Bytes from addr up to (not including) the first zero byte.

        A string that runs off the end of memory is an access fault.
        """
        end = addr
        while self.read8(end) != 0:
            end += 1
        return bytes(self._mem[addr:end])

    # --- Bulk load ---

    def clear(self):
        self._mem[:] = bytes(self.size)

    def load_words(self, base_addr: int, words: Iterable[int]) -> int:
        """Write consecutive words starting at base_addr.

        Returns the address one past the last word written.
        """
        addr = base_addr
        for word in words:
            self.write16(addr, word)
            addr += 2
        return addr

    def load_binary(self, data: Union[bytes, str, Path], base_addr: int = 0):
        """Copy a raw byte image (or the contents of a file) into memory."""
        if isinstance(data, (str, Path)):
            data = Path(data).read_bytes()
        self._check(base_addr, max(len(data), 1))
        self._mem[base_addr:base_addr + len(data)] = data

    # --- Dumps ---

    def dump_words(self, name: str, start: int, end: int, columns: int = 8) -> str:
        """Word dump of [start, end), eight words per row.

        [DATA]
        0100: 0007 8005 0000 000A ...
        """
        lines = [f"[{name}]"] if name else []
        row = []
        for addr in range(start, end, 2):
            if not row:
                row.append(f"{addr:04X}:")
            row.append(f"{self.read16(addr):04X}")
            if len(row) == columns + 1:
                lines.append(' '.join(row))
                row = []
        if row:
            lines.append(' '.join(row))
        return '\n'.join(lines)

    def hexdump(self, start: int, length: int = 256) -> str:
        """Produce a hex dump of memory for debugging."""
        lines = []
        end = min(start + length, self.size)
        for addr in range(start, end, 16):
            chunk = self._mem[addr:min(addr + 16, end)]
            hex_bytes = ' '.join(f'{b:02X}' for b in chunk)
            ascii_bytes = ''.join(chr(b) if 0x20 <= b < 0x7F else '.' for b in chunk)
            lines.append(f'{addr:04X}  {hex_bytes:<47}  {ascii_bytes}')
        return '\n'.join(lines)

    def snapshot(self, start: int = 0, end: int = None) -> bytes:
        """Copy of [start, end) for before/after comparisons."""
        return bytes(self._mem[start:end])
