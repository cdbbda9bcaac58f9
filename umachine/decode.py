"""Decoding instruction words and dispatching them to a machine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from umachine.bitpack import getu
from umachine.machine import Machine


class Opcode(IntEnum):
    """The fourteen operations of the universal machine."""

    CMOV = 0
    SLOAD = 1
    SSTORE = 2
    ADD = 3
    MUL = 4
    DIV = 5
    NAND = 6
    HALT = 7
    ACTIVATE = 8
    INACTIVATE = 9
    OUT = 10
    IN = 11
    LOADP = 12
    LV = 13


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction: its opcode, register operands and immediate."""

    opcode: Opcode
    a: int = 0
    b: int = 0
    c: int = 0
    value: int = 0


def decode_instruction(instruction: int) -> Instruction:
    """Split a 32-bit instruction word into its fields.

    Raises ValueError if the opcode field names no known operation.
    """
    code = getu(instruction, 4, 28)
    try:
        opcode = Opcode(code)
    except ValueError:
        raise ValueError(f"unknown opcode {code}") from None
    if opcode is Opcode.LV:
        return Instruction(
            opcode,
            a=getu(instruction, 3, 25),
            value=getu(instruction, 25, 0),
        )
    return Instruction(
        opcode,
        a=getu(instruction, 3, 6),
        b=getu(instruction, 3, 3),
        c=getu(instruction, 3, 0),
    )


def handle_instruction(machine: Machine, instruction: int) -> list[int] | None:
    """Execute one instruction word on machine, advancing its program counter.

    Returns the new program when a load-program replaces segment zero,
    otherwise None.
    """
    decoded = decode_instruction(instruction)
    machine.pc += 1
    a, b, c = decoded.a, decoded.b, decoded.c

    match decoded.opcode:
        case Opcode.CMOV:
            machine.cmov(a, b, c)
        case Opcode.SLOAD:
            machine.sload(a, b, c)
        case Opcode.SSTORE:
            machine.sstore(a, b, c)
        case Opcode.ADD:
            machine.add(a, b, c)
        case Opcode.MUL:
            machine.mul(a, b, c)
        case Opcode.DIV:
            machine.div(a, b, c)
        case Opcode.NAND:
            machine.nand(a, b, c)
        case Opcode.HALT:
            machine.halt()
        case Opcode.ACTIVATE:
            machine.activate(b, c)
        case Opcode.INACTIVATE:
            machine.inactivate(c)
        case Opcode.OUT:
            machine.output(c)
        case Opcode.IN:
            machine.input(c)
        case Opcode.LOADP:
            return machine.load_program(b, c)
        case Opcode.LV:
            machine.load_value(a, decoded.value)
    return None