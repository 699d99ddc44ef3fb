"""
AccCom Emulator - Program Loader + Input Provider

A program is two dense runs of pre-encoded words: a DATA section and a
CODE section, each written at its own base address. Loading clears the
whole memory image first, so every cell the program does not define
starts out as zero (including the word right after the last CODE word,
which acts as the end-of-code sentinel).

Input cells are pre-seeded before the run, either from the command line
(`seed`) or by prompting (`input_number`), using the sign-magnitude
encoding the engine expects.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Tuple

from .cpu import alu

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    """Half-open address range [begin, end)."""
    begin: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.begin

    def contains(self, addr: int) -> bool:
        return self.begin <= addr < self.end

    def __str__(self) -> str:
        return f"${self.begin:04X}-${self.end:04X}"


@dataclass(frozen=True)
class ProgramImage:
    """Where a loaded program landed and where it starts."""
    data: Region
    code: Region
    entry: int


def load_program(memory, program) -> ProgramImage:
    """Write a Program's sections into memory and return its layout.

    Raises MemoryAccessError if a section does not fit.
    """
    memory.clear()
    data_end = memory.load_words(program.data_base, program.data)
    code_end = memory.load_words(program.code_base, program.code)
    entry = program.code_base if program.entry is None else program.entry
    return ProgramImage(Region(program.data_base, data_end),
                        Region(program.code_base, code_end), entry)


def load_image(memory, path, base: int = 0, entry: int = None) -> ProgramImage:
    """Load a raw big-endian binary image as a single CODE region.

    The image carries no DATA/CODE split, so DATA is reported empty and
    the entry defaults to the load address.
    """
    data = Path(path).read_bytes()
    memory.clear()
    memory.load_binary(data, base)
    return ProgramImage(Region(base, base), Region(base, base + len(data)),
                        base if entry is None else entry)


# ══════════════════════════════════════════════
# Input provider
# ══════════════════════════════════════════════

def seed(memory, assignments: Dict[int, int],
         encode: Callable[[int], int] = alu.from_int):
    """Write {addr: value} into memory, sign-magnitude unless told otherwise."""
    for addr, value in assignments.items():
        memory.write16(addr, encode(value))
        log.debug("Seeded $%04X = %d", addr, value)


def input_number(memory, addr: int, prompt: str,
                 reader: Callable[[str], str] = input,
                 encode: Callable[[int], int] = alu.from_int) -> int:
    """Prompt for a decimal integer and store it at addr.

    Raises ValueError when the reply is not an integer or input has ended.
    """
    try:
        reply = reader(prompt)
    except EOFError:
        raise ValueError(f"No input for ${addr:04X} (end of input)") from None
    value = int(reply.strip())
    memory.write16(addr, encode(value))
    return value


def parse_int(text: str) -> int:
    """Parse hex (0x... or $...) or decimal, with optional sign."""
    text = text.strip()
    sign = 1
    if text and text[0] in '+-':
        sign = -1 if text[0] == '-' else 1
        text = text[1:]
    if text[:2].lower() == '0x':
        return sign * int(text[2:], 16)
    if text.startswith('$'):
        return sign * int(text[1:], 16)  # Motorola hex convention
    return sign * int(text)


def parse_assignment(text: str) -> Tuple[int, int]:
    """Parse 'ADDR=VALUE', e.g. '0x100=7' or '$102=-5'."""
    if '=' not in text:
        raise ValueError(f"Expected ADDR=VALUE, got {text!r}")
    addr_text, value_text = text.split('=', 1)
    return parse_int(addr_text), parse_int(value_text)
