"""
AccCom Emulator - Instruction Decoder

Every instruction is one 16-bit word:
  bits 15-12  opcode
  bits 11-0   operand

The operand means different things per opcode, so decoding produces an
Instruction whose `mode` says how to read it:
  INH   no operand (END sentinel)
  ADDR  12-bit memory address
  LIT   literal character code (PRC only; low byte is the character)
  CTL   control sub-code under opcode $8 (IAC / RET / HLT)

Opcode $8 fans out on its sub-code: $002 is IAC, $005 is RET and every
other value halts. Only $8000 is the canonical HLT encoding; other
sub-codes halt the same way but are marked non-canonical so a trace can
tell a deliberate halt from a malformed word.
"""

from dataclasses import dataclass

from ..faults import IllegalInstruction

# ──────────────────────────────────────────────
# Operand modes
# ──────────────────────────────────────────────

INH  = 'INH'
ADDR = 'ADDR'
LIT  = 'LIT'
CTL  = 'CTL'

OPCODE_MASK  = 0xF000
OPERAND_MASK = 0x0FFF

# ──────────────────────────────────────────────
# Opcode table
# ──────────────────────────────────────────────
# Format: opcode nibble -> (mnemonic, operand mode)

OPCODES = {
    0x0: ('END', INH),    # zero word: end-of-code sentinel
    0x1: ('LDA', ADDR),
    0x2: ('STA', ADDR),
    0x3: ('ADD', ADDR),
    0x4: ('SUB', ADDR),
    0x5: ('JMP', ADDR),
    0x6: ('CAL', ADDR),
    0x7: ('MUL', ADDR),
    0x8: ('CTL', CTL),    # resolved through CONTROL_CODES
    0x9: ('BRZ', ADDR),
    0xA: ('BRN', ADDR),
    0xB: ('PRT', ADDR),
    0xC: ('PRC', LIT),
    0xD: ('PRS', ADDR),
}

# Opcode $8 sub-codes; anything else is HLT
CONTROL_CODES = {
    0x002: 'IAC',
    0x005: 'RET',
}
HLT_CODE = 0x000


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction word."""
    mnemonic: str
    mode: str
    operand: int
    word: int

    @property
    def canonical(self) -> bool:
        """False for a halt reached through an unassigned $8 sub-code."""
        return not (self.mnemonic == 'HLT' and self.operand != HLT_CODE)

    @property
    def char(self) -> int:
        """PRC payload: the literal character code."""
        return self.operand & 0xFF

    def __str__(self) -> str:
        return disassemble(self.word)


def decode(word: int) -> Instruction:
    """Split an instruction word into a typed Instruction.

    Raises IllegalInstruction for opcodes $E and $F.
    """
    word &= 0xFFFF
    opcode = (word & OPCODE_MASK) >> 12
    operand = word & OPERAND_MASK

    if opcode not in OPCODES:
        raise IllegalInstruction(f"Undefined opcode ${opcode:X} in word ${word:04X}")

    mnem, mode = OPCODES[opcode]
    if mode == CTL:
        mnem = CONTROL_CODES.get(operand, 'HLT')
    return Instruction(mnem, mode, operand, word)


def decode_opcode(memory, pc: int):
    """Fetch and decode the instruction at pc.

    Returns: (instruction, next_pc)
    """
    word = memory.read16(pc)
    return decode(word), (pc + 2) & 0xFFFF


def disassemble(word: int) -> str:
    """Render one word as assembly text, e.g. 'LDA $100' or "PRC ' '"."""
    try:
        ins = decode(word)
    except IllegalInstruction:
        return f".WORD ${word & 0xFFFF:04X}"

    if ins.mode == INH:
        return ins.mnemonic
    if ins.mode == CTL:
        if ins.canonical:
            return ins.mnemonic
        return f"{ins.mnemonic} ${ins.operand:03X}"
    if ins.mode == LIT:
        ch = ins.char
        if 0x20 <= ch < 0x7F:
            return f"{ins.mnemonic} '{chr(ch)}'"
        return f"{ins.mnemonic} ${ch:02X}"
    return f"{ins.mnemonic} ${ins.operand:03X}"
