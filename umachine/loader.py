"""Reading machine programs made of big-endian 32-bit words."""

from __future__ import annotations

import os
from typing import BinaryIO

from umachine.bitpack import newu

WORD_BYTES = 4


def read_instruction(stream: BinaryIO) -> int | None:
    """Read one big-endian word, or return None if fewer than 4 bytes remain."""
    data = stream.read(WORD_BYTES)
    if len(data) < WORD_BYTES:
        return None
    word = 0
    for index, byte in enumerate(data):
        word = newu(word, 8, 24 - index * 8, byte)
    return word


def store_code(stream: BinaryIO) -> list[int]:
    """Read every whole word in the stream; trailing bytes are ignored."""
    code = []
    while (instruction := read_instruction(stream)) is not None:
        code.append(instruction)
    return code


def load_program(path: str | os.PathLike[str]) -> list[int]:
    """Read the program stored in the file at path."""
    with open(path, "rb") as stream:
        return store_code(stream)