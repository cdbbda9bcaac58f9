"""State and instruction semantics of the universal machine."""

from __future__ import annotations

import logging
import sys
from collections import deque
from typing import BinaryIO, Iterable

logger = logging.getLogger(__name__)

WORD_MASK = 0xFFFFFFFF
REGISTER_COUNT = 8


class MachineHalted(Exception):
    """Raised when the machine executes a halt instruction."""


def format_binary(n: int) -> str:
    """Return the 32-bit binary representation of n."""
    return format(n & WORD_MASK, "032b")


class Machine:
    """Eight registers, a set of memory segments and an I/O pair."""

    def __init__(
        self,
        program: Iterable[int],
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
    ) -> None:
        self.registers: list[int] = [0] * REGISTER_COUNT
        self.segments: list[list[int] | None] = [list(program)]
        self.recycled: deque[int] = deque()
        self.pc = 0
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout.buffer

    @property
    def program(self) -> list[int]:
        """The segment currently being executed (segment zero)."""
        segment = self.segments[0]
        assert segment is not None
        return segment

    def _segment(self, ident: int) -> list[int]:
        if ident >= len(self.segments) or self.segments[ident] is None:
            raise ValueError(f"segment {ident} is not mapped")
        return self.segments[ident]

    def load_value(self, a: int, value: int) -> None:
        logger.debug("Inside loadval")
        self.registers[a] = value & WORD_MASK

    def cmov(self, a: int, b: int, c: int) -> None:
        logger.debug("Inside cmov")
        if self.registers[c] != 0:
            self.registers[a] = self.registers[b]

    def sload(self, a: int, b: int, c: int) -> None:
        logger.debug("Inside sload")
        self.registers[a] = self._segment(self.registers[b])[self.registers[c]]

    def sstore(self, a: int, b: int, c: int) -> None:
        logger.debug("Inside sstore")
        self._segment(self.registers[a])[self.registers[b]] = self.registers[c]

    def add(self, a: int, b: int, c: int) -> None:
        logger.debug("Inside add")
        self.registers[a] = (self.registers[b] + self.registers[c]) & WORD_MASK

    def mul(self, a: int, b: int, c: int) -> None:
        logger.debug("Inside mul")
        self.registers[a] = (self.registers[b] * self.registers[c]) & WORD_MASK

    def div(self, a: int, b: int, c: int) -> None:
        logger.debug("Inside div")
        self.registers[a] = self.registers[b] // self.registers[c]

    def nand(self, a: int, b: int, c: int) -> None:
        logger.debug("Inside nand")
        self.registers[a] = ~(self.registers[b] & self.registers[c]) & WORD_MASK

    def halt(self) -> None:
        """Release all segments and stop the machine."""
        logger.debug("Inside halt")
        self.segments.clear()
        self.recycled.clear()
        raise MachineHalted()

    def activate(self, b: int, c: int) -> None:
        logger.debug("Inside activate")
        new_segment = [0] * self.registers[c]
        if self.recycled:
            ident = self.recycled.popleft()
            self.segments[ident] = new_segment
        else:
            ident = len(self.segments)
            self.segments.append(new_segment)
        self.registers[b] = ident

    def inactivate(self, c: int) -> None:
        logger.debug("Inside inactivate")
        ident = self.registers[c]
        if ident == 0:
            raise ValueError("segment 0 cannot be unmapped")
        self._segment(ident)
        self.segments[ident] = None
        self.recycled.append(ident)

    def output(self, c: int) -> None:
        logger.debug("Inside out")
        value = self.registers[c]
        if value > 255:
            raise ValueError(f"cannot output value {value}: not a byte")
        self.stdout.write(bytes([value]))

    def input(self, c: int) -> None:
        logger.debug("Inside input")
        data = self.stdin.read(1)
        self.load_value(c, data[0] if data else WORD_MASK)

    def load_program(self, b: int, c: int) -> list[int] | None:
        """Jump to registers[c]; if registers[b] is nonzero, duplicate that
        segment into segment zero and return the new program."""
        logger.debug("Inside loadp")
        self.pc = self.registers[c]
        source = self.registers[b]
        if source == 0:
            return None
        new_program = list(self._segment(source))
        self.segments[0] = new_program
        return new_program

    def dump_segments(self) -> str:
        """Describe every segment, one word per line in binary."""
        lines = []
        for index, segment in enumerate(self.segments):
            lines.append(f"Segment {index}:")
            if segment is None:
                lines.append("NULL")
            else:
                lines.extend(format_binary(word) for word in segment)
        return "".join(line + "\n" for line in lines)

    def dump_registers(self) -> str:
        """Describe the register file on one line."""
        return "registers: " + "".join(f"{r} " for r in self.registers) + "\n"