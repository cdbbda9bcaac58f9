# umachine

An emulator for the Universal Machine. This is a 32-bit register machine
with eight registers, memory segments that a program can create and free,
and fourteen instructions. The package holds bit-field helpers, a program
loader, an instruction decoder, the machine, and a generator that writes
small unit-test programs for the machine.

## Installation

```
pip install .
```

To install with the test tools as well:

```
pip install .[test]
```

## Running a program

A program file is a stream of big-endian 32-bit instruction words. If the
file ends with fewer than four bytes, those bytes are ignored.

```
um program.um
```

An input instruction reads one byte from standard input. At end of input
it loads `0xFFFFFFFF`. An output instruction writes one byte to standard
output. The program stops when it runs a halt instruction or when the
program counter moves past the end of segment zero. Both cases exit with
status 0.

The command exits with status 1 in these cases:

- The file cannot be opened. It prints `<path>: No such file or directory`.
- The program fails at run time. It prints `umachine: <message>`. Run-time
  failures are an unknown opcode, division by zero, output of a value
  above 255, access to an unmapped segment or an index out of range, and
  unmapping segment 0.

Each instruction logs a debug message such as `Inside add` on the
`umachine.machine` logger. These messages show only when logging is set up
at DEBUG level.

## Writing unit-test programs

```
um-testgen
```

This writes every registered test case. It prints
`***** Writing test '<name>'.` for each case. A case writes these files
under the current directory:

- `<name>.um`, the program.
- `<name>.0`, the input. It is written only when the case has input and is
  removed otherwise.
- `<name>.1`, the expected output. It is written only when the expected
  output is not empty and is removed otherwise.

The only registered case is `folder/loadp2`, so the directory `folder` must
already exist. To write only some cases, give their names:

```
um-testgen folder/loadp2
```

For each unknown name the command prints `***** No test named <name> *****`
to standard error. The command then exits with status 1.

## Using the library

```python
import io

from umachine import testgen
from umachine.cli import run
from umachine.testgen import Register

words = [
    testgen.loadval(Register.r0, 65),
    testgen.output(Register.r0),
    testgen.halt(),
]

out = io.BytesIO()
run(words, io.BytesIO(), out)
assert out.getvalue() == b"A"

program_file = io.BytesIO()
testgen.write_sequence(program_file, words)
```

### Modules

- `umachine.bitpack` handles bit fields in 64-bit words.
  - `fitsu` and `fitss` test whether a value fits in a field.
  - `getu` and `gets` read a field.
  - `newu` and `news` return a word with one field replaced.
  - A value that does not fit raises `BitpackOverflow`, which is a subclass
    of `OverflowError`.
  - A width or field position outside the 64-bit word raises `ValueError`.
- `umachine.loader` reads program words.
  - `read_instruction` reads one word from a binary stream. It returns
    `None` when fewer than four bytes remain.
  - `store_code` reads every whole word from a stream.
  - `load_program` reads a program file.
- `umachine.machine` holds the machine and its errors.
  - `Machine` holds the registers, the segments, the recycled segment ids
    and the program counter. It has one method per instruction: `load_value`,
    `cmov`, `sload`, `sstore`, `add`, `mul`, `div`, `nand`, `halt`,
    `activate`, `inactivate`, `output`, `input` and `load_program`.
  - `dump_segments` and `dump_registers` return text descriptions of the
    machine state.
  - `halt` frees all segments and raises `MachineHalted`.
  - `format_binary` returns a value as 32 binary digits.
- `umachine.decode` decodes and runs instructions.
  - `Opcode` is an `IntEnum` of the fourteen operations.
  - `Instruction` is a frozen dataclass of the decoded fields: `opcode`,
    `a`, `b`, `c` and `value`.
  - `decode_instruction` splits a word into these fields. It raises
    `ValueError` for an unknown opcode.
  - `handle_instruction` advances the program counter and runs one word on
    a machine.
- `umachine.cli` runs programs.
  - `run(program, stdin, stdout)` runs a program until it stops and returns
    the `Machine`.
  - `main` is the `um` command.
- `umachine.testgen` builds and writes test programs.
  - It has one instruction builder per operation: `halt`, `cmov`, `add`,
    `mul`, `div`, `input_char`, `nand`, `sstore`, `sload`, `activate`,
    `inactivate`, `load_program`, `output`, `loadval`, and the underlying
    `three_register`.
  - `loadval2` always returns the fixed word `0x20000011`.
  - `Register` is an `IntEnum` of the registers `r0` to `r7`.
  - `write_sequence` writes words in big-endian order.
  - The `build_*_test*` functions each return a list of instruction words.
  - `UnitTest` describes one test case.
  - `write_test_files` writes one case into a directory.
  - `main` is the `um-testgen` command.

## What it does not do

- There is no disassembler, debugger or interactive mode. The only way to
  run a program is to run it to completion.
- Many `build_*` functions in `umachine.testgen` are not registered as
  test cases. Only `folder/loadp2` is written by `um-testgen`. The other
  programs are available only by calling their functions.

## Running the tests

```
pytest
```