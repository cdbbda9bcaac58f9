"""Command-line entry point that runs a machine program file."""

from __future__ import annotations

import argparse
import sys
from typing import BinaryIO, Iterable, Sequence

from umachine.decode import handle_instruction
from umachine.loader import load_program
from umachine.machine import Machine, MachineHalted


def run(
    program: Iterable[int],
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
) -> Machine:
    """Execute program until it halts or runs past the end of segment zero."""
    machine = Machine(program, stdin, stdout)
    try:
        while machine.pc < len(machine.program):
            handle_instruction(machine, machine.program[machine.pc])
    except MachineHalted:
        pass
    return machine


def main(argv: Sequence[str] | None = None) -> int:
    """Run the program file named on the command line; return the exit status."""
    parser = argparse.ArgumentParser(
        prog="umachine", description="Run a universal machine program."
    )
    parser.add_argument("program", help="file of big-endian 32-bit instructions")
    args = parser.parse_args(argv)

    try:
        program = load_program(args.program)
    except OSError:
        print(f"{args.program}: No such file or directory", file=sys.stderr)
        return 1

    try:
        run(program, sys.stdin.buffer, sys.stdout.buffer)
    except (ValueError, IndexError, ZeroDivisionError) as exc:
        print(f"umachine: {exc}", file=sys.stderr)
        return 1
    finally:
        sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())