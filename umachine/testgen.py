"""Building machine unit-test programs and writing them to disk."""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import BinaryIO, Callable, Iterable, Sequence

from umachine.bitpack import getu, newu
from umachine.decode import Opcode

WORD_WIDTH = 32


class Register(IntEnum):
    """The eight machine registers."""

    r0 = 0
    r1 = 1
    r2 = 2
    r3 = 3
    r4 = 4
    r5 = 5
    r6 = 6
    r7 = 7


def three_register(op: int, ra: int, rb: int, rc: int) -> int:
    """Encode an instruction that names three registers."""
    word = newu(0, 4, 28, op)
    word = newu(word, 3, 6, ra)
    word = newu(word, 3, 3, rb)
    return newu(word, 3, 0, rc)


def loadval(ra: int, val: int) -> int:
    """Encode a load-value instruction putting val into register ra."""
    word = newu(0, 4, 28, Opcode.LV)
    word = newu(word, 3, 25, ra)
    return newu(word, 25, 0, val)


def loadval2(val: int) -> int:
    """Encode the fixed word 0x20000011 (a segmented store r0, r2, r1).

    The argument is ignored.
    """
    return three_register(Opcode.SSTORE, Register.r0, Register.r2, Register.r1)


def halt() -> int:
    return three_register(Opcode.HALT, 0, 0, 0)


def cmov(a: int, b: int, c: int) -> int:
    return three_register(Opcode.CMOV, a, b, c)


def add(a: int, b: int, c: int) -> int:
    return three_register(Opcode.ADD, a, b, c)


def mul(a: int, b: int, c: int) -> int:
    return three_register(Opcode.MUL, a, b, c)


def div(a: int, b: int, c: int) -> int:
    return three_register(Opcode.DIV, a, b, c)


def input_char(c: int) -> int:
    return three_register(Opcode.IN, 0, 0, c)


def nand(a: int, b: int, c: int) -> int:
    return three_register(Opcode.NAND, a, b, c)


def sstore(a: int, b: int, c: int) -> int:
    return three_register(Opcode.SSTORE, a, b, c)


def sload(a: int, b: int, c: int) -> int:
    return three_register(Opcode.SLOAD, a, b, c)


def activate(b: int, c: int) -> int:
    return three_register(Opcode.ACTIVATE, 0, b, c)


def inactivate(c: int) -> int:
    return three_register(Opcode.INACTIVATE, 0, 0, c)


def load_program(b: int, c: int) -> int:
    return three_register(Opcode.LOADP, 0, b, c)


def output(c: int) -> int:
    return three_register(Opcode.OUT, 0, 0, c)


def write_sequence(output: BinaryIO, stream: Iterable[int]) -> None:
    """Write each instruction as a big-endian 32-bit word."""
    for inst in stream:
        output.write(
            bytes(getu(inst, 8, lsb) for lsb in range(WORD_WIDTH - 8, -1, -8))
        )


R = Register


def build_halt_test1() -> list[int]:
    return [halt()]


def build_out_test1() -> list[int]:
    """Basic load-value and output."""
    return [loadval(R.r0, 65), output(R.r0), halt()]


def build_out_test2() -> list[int]:
    """Load, overwrite and output every register."""
    stream = [loadval(R.r6, 10), loadval(R.r7, 32)]
    letters = list(Register)[:6]
    for first in (65, 66):
        stream.extend(loadval(reg, first + reg) for reg in letters)
        for reg in letters:
            stream.extend((output(reg), output(R.r7)))
        stream.append(output(R.r6))
    stream.append(halt())
    return stream


def build_out_test3() -> list[int]:
    """Output a character outside ASCII."""
    return [loadval(R.r7, 243), output(R.r7), halt()]


def build_input_test1() -> list[int]:
    """Input repeatedly into the same register, then read end of input."""
    stream = []
    for _ in range(5):
        stream.extend((input_char(R.r0), output(R.r0)))
    stream.extend((input_char(R.r0), halt()))
    return stream


def build_input_test2() -> list[int]:
    """Input into different registers."""
    return [
        input_char(R.r0),
        input_char(R.r1),
        input_char(R.r2),
        input_char(R.r3),
        output(R.r0),
        output(R.r1),
        output(R.r2),
        output(R.r3),
        input_char(R.r0),
        input_char(R.r4),
        output(R.r0),
        halt(),
    ]


def build_cmov_test1() -> list[int]:
    """Condition register is zero, so no move happens."""
    return [
        loadval(R.r0, 0),
        loadval(R.r1, 50),
        loadval(R.r2, 70),
        cmov(R.r1, R.r2, R.r0),
        output(R.r1),
        output(R.r2),
        halt(),
    ]


def build_cmov_test2() -> list[int]:
    """Condition register is nonzero, so the move happens."""
    return [
        loadval(R.r0, 1),
        loadval(R.r1, 50),
        loadval(R.r2, 70),
        cmov(R.r1, R.r2, R.r0),
        output(R.r1),
        output(R.r2),
        halt(),
    ]


def build_add_test1() -> list[int]:
    return [
        loadval(R.r0, 67),
        loadval(R.r1, 12),
        loadval(R.r2, 9),
        output(R.r0),
        add(R.r3, R.r0, R.r1),
        output(R.r3),
        output(R.r3),
        add(R.r4, R.r0, R.r2),
        output(R.r4),
        halt(),
    ]


def build_add_test2() -> list[int]:
    """Add a register to itself, storing into the same register."""
    return [loadval(R.r0, 36), add(R.r0, R.r0, R.r0), output(R.r0), halt()]


def build_mul_test1() -> list[int]:
    return [
        loadval(R.r0, 33),
        loadval(R.r5, 2),
        mul(R.r4, R.r0, R.r5),
        output(R.r4),
        halt(),
    ]


def build_mul_test2() -> list[int]:
    """The product reaches 2**32 and must wrap to zero."""
    return [
        loadval(R.r0, 1 << 24),
        loadval(R.r5, 1 << 8),
        loadval(R.r3, 65),
        mul(R.r4, R.r0, R.r5),
        add(R.r2, R.r4, R.r3),
        output(R.r2),
        halt(),
    ]


def build_div_test1() -> list[int]:
    """Division rounds down."""
    return [
        loadval(R.r0, 131),
        loadval(R.r1, 2),
        div(R.r1, R.r0, R.r1),
        output(R.r1),
        halt(),
    ]


def build_div_test2() -> list[int]:
    return [
        loadval(R.r0, 122),
        output(R.r0),
        loadval(R.r1, R.r2),
        div(R.r2, R.r0, R.r1),
        output(R.r2),
        loadval(R.r5, 29),
        add(R.r4, R.r2, R.r5),
        output(R.r4),
        halt(),
    ]


def build_nand_test1() -> list[int]:
    return [
        loadval(R.r0, 209),
        loadval(R.r1, 17),
        loadval(R.r2, 127),
        loadval(R.r3, 122),
        nand(R.r4, R.r0, R.r1),
        nand(R.r5, R.r2, R.r3),
        nand(R.r6, R.r4, R.r5),
        output(R.r6),
        halt(),
    ]


def build_activate_test1() -> list[int]:
    return [loadval(R.r4, 3), activate(R.r2, R.r4), halt()]


def build_inactivate_test1() -> list[int]:
    return [loadval(R.r4, 3), activate(R.r2, R.r4), inactivate(R.r2), halt()]


def build_inactivate_test2() -> list[int]:
    return [
        activate(R.r0, R.r3),
        activate(R.r1, R.r4),
        inactivate(R.r0),
        activate(R.r2, R.r5),
        halt(),
    ]


def build_sstore_test1() -> list[int]:
    return [
        loadval(R.r4, 4),
        activate(R.r0, R.r4),
        loadval(R.r3, 8),
        loadval(R.r2, 2),
        sstore(R.r0, R.r2, R.r3),
        halt(),
    ]


def build_sload_test1() -> list[int]:
    return [
        loadval(R.r4, 5),
        activate(R.r0, R.r4),
        loadval(R.r3, 65),
        loadval(R.r2, 3),
        sstore(R.r0, R.r2, R.r3),
        sload(R.r4, R.r0, R.r2),
        output(R.r4),
        halt(),
    ]


def build_loadp_test1() -> list[int]:
    """Jump within segment zero past an output."""
    return [
        loadval(R.r0, 65),
        loadval(R.r1, 0),
        loadval(R.r2, 5),
        load_program(R.r1, R.r2),
        output(R.r0),
        halt(),
    ]


def build_loadp_test2() -> list[int]:
    """Build a halt in a new segment and load it as the program."""
    return [
        loadval(R.r0, 65),
        loadval(R.r5, 5),
        activate(R.r1, R.r5),
        loadval(R.r2, 29360128),
        loadval(R.r3, 64),
        mul(R.r4, R.r2, R.r3),
        loadval(R.r6, 3),
        sstore(R.r1, R.r6, R.r4),
        load_program(R.r1, R.r6),
        output(R.r0),
        halt(),
    ]


@dataclass(frozen=True)
class UnitTest:
    """A named test program with its input and expected output."""

    name: str
    test_input: str | None
    expected_output: str | None
    build: Callable[[], list[int]]


TESTS: tuple[UnitTest, ...] = (
    UnitTest("folder/loadp2", None, "", build_loadp_test2),
)


def _write_or_remove(path: Path, contents: str | None) -> None:
    if not contents:
        path.unlink(missing_ok=True)
    else:
        path.write_bytes(contents.encode("latin-1"))


def write_test_files(test: UnitTest, directory: str | os.PathLike[str] = ".") -> None:
    """Write <name>.um, and <name>.0 / <name>.1 when input / output are given."""
    base = Path(directory)
    with open(base / f"{test.name}.um", "wb") as binary:
        write_sequence(binary, test.build())
    _write_or_remove(base / f"{test.name}.0", test.test_input)
    _write_or_remove(base / f"{test.name}.1", test.expected_output)


def main(argv: Sequence[str] | None = None) -> int:
    """Write all tests, or only those named; return nonzero if a name is unknown."""
    parser = argparse.ArgumentParser(
        prog="umachine-testgen", description="Write machine unit-test files."
    )
    parser.add_argument("names", nargs="*", help="tests to write (default: all)")
    args = parser.parse_args(argv)

    if not args.names:
        for test in TESTS:
            print(f"***** Writing test '{test.name}'.")
            write_test_files(test)
        return 0

    failed = False
    for name in args.names:
        matches = [test for test in TESTS if test.name == name]
        for test in matches:
            write_test_files(test)
        if not matches:
            failed = True
            print(f"***** No test named {name} *****", file=sys.stderr)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())