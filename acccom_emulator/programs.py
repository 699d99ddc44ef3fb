"""
AccCom Emulator - Bundled Programs

Hand-encoded sample programs. Each one is a Program: a DATA section, a
CODE section, the entry point and the DATA cells that act as inputs
(with the default values already baked into DATA).

Word encoding reminder:
  $1aaa LDA   $2aaa STA   $3aaa ADD   $4aaa SUB   $5aaa JMP
  $6aaa CAL   $7aaa MUL   $8002 IAC   $8005 RET   $8000 HLT
  $9aaa BRZ   $Aaaa BRN   $Baaa PRT   $C0cc PRC   $Daaa PRS
Numbers in DATA are sign-magnitude: $8005 is -5.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class Program:
    name: str
    description: str
    data_base: int
    data: Tuple[int, ...]
    code_base: int
    code: Tuple[int, ...]
    entry: Optional[int] = None
    inputs: Tuple[Tuple[int, str], ...] = ()
    machine: str = 'acccom'


# ──────────────────────────────────────────────
# X = A*B + 10
# ──────────────────────────────────────────────

PRODUCT_SUM = Program(
    name='product_sum',
    description='X = A*B + 10, print "X=" and X',
    data_base=0x0100,
    data=(
        0x0007,   # 0100: A = 7
        0x8005,   # 0102: B = -5
        0x0000,   # 0104: X
        0x000A,   # 0106: 10
        0x583D,   # 0108: "X="
        0x0000,   # 010A: '\0'
    ),
    code_base=0x0200,
    code=(
        0x1100,   # 0200: LDA A
        0x7102,   # 0202: MUL B
        0x3106,   # 0204: ADD 10
        0x2104,   # 0206: STA X
        0xD108,   # 0208: PRS "X="
        0xB104,   # 020A: PRT X
        0xC00A,   # 020C: PRC '\n'
        0x8000,   # 020E: HLT
    ),
    inputs=((0x0100, 'A'), (0x0102, 'B')),
)

# ──────────────────────────────────────────────
# Y = A*X^2 + B*X + C
# ──────────────────────────────────────────────

QUADRATIC = Program(
    name='quadratic',
    description='Y = A*X^2 + B*X + C',
    data_base=0x0100,
    data=(
        0x0007,   # 0100: A = 7
        0x8005,   # 0102: B = -5
        0x000A,   # 0104: C = 10
        0x0002,   # 0106: X = 2
        0x0000,   # 0108: Y
        0x593D,   # 010A: "Y="
        0x0000,   # 010C: '\0'
    ),
    code_base=0x0200,
    code=(
        0x1100,   # 0200: LDA A
        0x7106,   # 0202: MUL X
        0x7106,   # 0204: MUL X
        0x2108,   # 0206: STA Y
        0x1102,   # 0208: LDA B
        0x7106,   # 020A: MUL X
        0x3108,   # 020C: ADD Y
        0x3104,   # 020E: ADD C
        0x2108,   # 0210: STA Y
        0xD10A,   # 0212: PRS "Y="
        0xB108,   # 0214: PRT Y
        0xC00A,   # 0216: PRC '\n'
        0x8000,   # 0218: HLT
    ),
    inputs=((0x0100, 'A'), (0x0102, 'B'), (0x0104, 'C'), (0x0106, 'X')),
)

# ──────────────────────────────────────────────
# Primes in [A, B]
# ──────────────────────────────────────────────
# main calls isPrime, which calls isDivisor; isDivisor sets flag when
# some i*j == n for 2 <= i <= n-1. Two RETs unwind back to main.

PRIME_LIST = Program(
    name='prime_list',
    description='Print the primes between A and B',
    data_base=0x0100,
    data=(
        0x0002,   # 0100: a = 2
        0x000A,   # 0102: b = 10
        0x0000,   # 0104: n
        0x0000,   # 0106: flag
        0x0000,   # 0108: i
        0x0001,   # 010A: true
        0x0000,   # 010C: false
        0x0002,   # 010E: init = 2
        0x0001,   # 0110: j
        0x0000,   # 0112: div
        0x0001,   # 0114: one
        0x0000,   # 0116: zero
    ),
    code_base=0x0200,
    code=(
        # isDivisor
        0x110E,   # 0200: LDA init
        0x2108,   # 0202: STA i
        0x1104,   # 0204: LDA n
        0x4114,   # 0206: SUB one
        0x4108,   # 0208: SUB i
        0xA240,   # 020A: BRN 240      i > n-1: not divisible
        0x1116,   # 020C: LDA zero
        0x2110,   # 020E: STA j
        0x1108,   # 0210: LDA i
        0x7110,   # 0212: MUL j
        0x2112,   # 0214: STA div
        0x1104,   # 0216: LDA n
        0x4112,   # 0218: SUB div
        0xA238,   # 021A: BRN 238      i*j > n: next i
        0x1104,   # 021C: LDA n
        0x4112,   # 021E: SUB div
        0x9224,   # 0220: BRZ 224
        0x522A,   # 0222: JMP 22A
        0x110A,   # 0224: LDA true
        0x2106,   # 0226: STA flag
        0x8005,   # 0228: RET
        0x1110,   # 022A: LDA j
        0x8002,   # 022C: IAC
        0x2110,   # 022E: STA j
        0x1108,   # 0230: LDA i
        0x7110,   # 0232: MUL j
        0x2112,   # 0234: STA div
        0x5216,   # 0236: JMP 216
        0x1108,   # 0238: LDA i
        0x8002,   # 023A: IAC
        0x2108,   # 023C: STA i
        0x5204,   # 023E: JMP 204
        0x8005,   # 0240: RET
        # isPrime
        0x6200,   # 0242: CAL isDivisor
        0x8005,   # 0244: RET
        # main
        0x1100,   # 0246: LDA a
        0x2104,   # 0248: STA n
        0x110E,   # 024A: LDA init
        0x4100,   # 024C: SUB a
        0xA254,   # 024E: BRN 254      a > 2: start at a
        0x110E,   # 0250: LDA init
        0x2104,   # 0252: STA n
        0x1102,   # 0254: LDA b
        0x4104,   # 0256: SUB n
        0xA272,   # 0258: BRN 272      n > b: done
        0x110C,   # 025A: LDA false
        0x2106,   # 025C: STA flag
        0x6242,   # 025E: CAL isPrime
        0x1106,   # 0260: LDA flag
        0x410A,   # 0262: SUB true
        0x926A,   # 0264: BRZ 26A      composite: skip print
        0xB104,   # 0266: PRT n
        0xC020,   # 0268: PRC ' '
        0x1104,   # 026A: LDA n
        0x8002,   # 026C: IAC
        0x2104,   # 026E: STA n
        0x5254,   # 0270: JMP 254
        0x8000,   # 0272: HLT
    ),
    entry=0x0246,
    inputs=((0x0100, 'A'), (0x0102, 'B')),
)

# ──────────────────────────────────────────────
# Centred pyramid of '#'
# ──────────────────────────────────────────────
# Row i gets (height - i + 1) spaces and star = 2i - 1 hashes.

PYRAMID = Program(
    name='pyramid',
    description='Print a pyramid of # of the given height',
    data_base=0x0100,
    data=(
        0x0003,   # 0100: height = 3
        0x0001,   # 0102: star = 1
        0x0001,   # 0104: i = 1
        0x0001,   # 0106: j = 1
        0x0000,   # 0108: k = 0
        0x0000,   # 010A: '\0'
    ),
    code_base=0x0200,
    code=(
        0x1100,   # 0200: LDA height
        0xA24C,   # 0202: BRN 24C      negative height
        0x1100,   # 0204: LDA height
        0x4104,   # 0206: SUB i
        0xA24C,   # 0208: BRN 24C      i > height: done
        0x1108,   # 020A: LDA k
        0x4108,   # 020C: SUB k
        0x2108,   # 020E: STA k        k = 0
        0x1106,   # 0210: LDA j
        0x4106,   # 0212: SUB j
        0x8002,   # 0214: IAC
        0x2106,   # 0216: STA j        j = 1
        0x1100,   # 0218: LDA height
        0x4104,   # 021A: SUB i
        0x4108,   # 021C: SUB k
        0xA22A,   # 021E: BRN 22A
        0xC020,   # 0220: PRC ' '
        0x1108,   # 0222: LDA k
        0x8002,   # 0224: IAC
        0x2108,   # 0226: STA k
        0x5218,   # 0228: JMP 218
        0x1102,   # 022A: LDA star
        0x4106,   # 022C: SUB j
        0xA23A,   # 022E: BRN 23A
        0xC023,   # 0230: PRC '#'
        0x1106,   # 0232: LDA j
        0x8002,   # 0234: IAC
        0x2106,   # 0236: STA j
        0x522A,   # 0238: JMP 22A
        0x1102,   # 023A: LDA star
        0x8002,   # 023C: IAC
        0x8002,   # 023E: IAC
        0x2102,   # 0240: STA star
        0x1104,   # 0242: LDA i
        0x8002,   # 0244: IAC
        0x2104,   # 0246: STA i
        0xC00A,   # 0248: PRC '\n'
        0x5204,   # 024A: JMP 204
        0x8000,   # 024C: HLT
    ),
    inputs=((0x0100, 'Height'),),
)

# ──────────────────────────────────────────────
# picoMIPS: Y = A*A + B*B
# ──────────────────────────────────────────────
# Register machine, two's complement data ($FF9C is -100).

PICO_SUM_SQUARES = Program(
    name='pico_sum_squares',
    description='picoMIPS: Y = A*A + B*B',
    data_base=0x0100,
    data=(
        0x0064,   # 0100: A = 100
        0xFF9C,   # 0102: B = -100
        0x0000,   # 0104: Y
    ),
    code_base=0x0200,
    code=(
        0x0003,   # 0200: sub  r0, r0, r0
        0xA010,   # 0202: addi r0, r0, 0x10
        0x0004,   # 0204: mul  r0, r0, r0      r0 = 0x0100
        0x4040,   # 0206: lw   r1, 0(r0)
        0x4081,   # 0208: lw   r2, 1(r0)
        0x025C,   # 020A: mul  r3, r1, r1
        0x04A4,   # 020C: mul  r4, r2, r2
        0x072A,   # 020E: add  r5, r3, r4
        0x5142,   # 0210: sw   r5, 2(r0)
        0xF000,   # 0212: halt
    ),
    inputs=((0x0100, 'A'), (0x0102, 'B')),
    machine='picomips',
)


PROGRAMS: Dict[str, Program] = {
    p.name: p for p in (PRODUCT_SUM, QUADRATIC, PRIME_LIST, PYRAMID, PICO_SUM_SQUARES)
}
