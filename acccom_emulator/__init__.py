"""
AccCom Emulator
===============
Instruction-set simulator for the AccCom accumulator machine: a
single-address computer with one sign-magnitude accumulator, zero and
negative flags, a CAL/RET stack in low memory and four print opcodes.
A separate engine runs the picoMIPS register-machine variant.

    ┌──────────┐    ┌──────────┐    ┌──────────┐    ┌──────────┐
    │ Program  │───>│  Loader  │───>│  Memory  │<──>│ Emulator │───> IOSink
    │ (words)  │    │          │    │ + stack  │    │ (F/D/E)  │
    └──────────┘    └──────────┘    └──────────┘    └──────────┘

    - cpu/alu.py:      sign-magnitude codec and arithmetic
    - cpu/decoder.py:  opcode table, typed Instruction, disassembler
    - cpu/regs.py:     ACC, PC, zero/negative flags
    - mem/:            bounded memory image and call stack
    - periph/sink.py:  console, buffer and serial output sinks
    - emu.py:          fetch/decode/execute loop, StopReason
    - pico/:           picoMIPS register machine
"""

__version__ = "0.2.0"

from .cpu import alu
from .cpu.decoder import Instruction, decode, disassemble
from .cpu.regs import Registers
from .mem.memory import Memory
from .mem.stack import CallStack
from .periph.sink import IOSink, ConsoleSink, BufferSink, SerialSink
from .faults import (
    MachineFault, MemoryAccessError, StackOverflow, StackUnderflow,
    IllegalInstruction, DivideByZero,
)
from .loader import Region, ProgramImage, load_program, load_image, seed, input_number
from .programs import Program, PROGRAMS
from .emu import AccComEmulator, StopReason, run
from .pico import PicoMIPSEmulator
