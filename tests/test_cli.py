import io
import sys

import pytest

from umachine.bitpack import newu
from umachine.cli import main, run
from umachine.decode import Opcode


def _three(op, a, b, c):
    word = newu(0, 4, 28, op)
    word = newu(word, 3, 6, a)
    word = newu(word, 3, 3, b)
    return newu(word, 3, 0, c)


def _lv(a, value):
    word = newu(0, 4, 28, Opcode.LV)
    word = newu(word, 3, 25, a)
    return newu(word, 25, 0, value)


def _out(c):
    return _three(Opcode.OUT, 0, 0, c)


def _halt():
    return _three(Opcode.HALT, 0, 0, 0)


def _input(c):
    return _three(Opcode.IN, 0, 0, c)


def _run(program, data=b""):
    stdout = io.BytesIO()
    run(program, io.BytesIO(data), stdout)
    return stdout.getvalue()


def _to_bytes(program):
    return b"".join(word.to_bytes(4, "big") for word in program)


def test_out_test1():
    assert _run([_lv(0, 65), _out(0), _halt()]) == b"A"


def test_halt_only_produces_nothing():
    assert _run([_halt()]) == b""


def test_add_test1():
    program = [
        _lv(0, 67), _lv(1, 12), _lv(2, 9), _out(0),
        _three(Opcode.ADD, 3, 0, 1), _out(3), _out(3),
        _three(Opcode.ADD, 4, 0, 2), _out(4), _halt(),
    ]
    assert _run(program) == b"COOL"


def test_mul_test2_wraps_around():
    program = [
        _lv(0, 1 << 24), _lv(5, 1 << 8), _lv(3, 65),
        _three(Opcode.MUL, 4, 0, 5), _three(Opcode.ADD, 2, 4, 3),
        _out(2), _halt(),
    ]
    assert _run(program) == b"A"


def test_div_test1_rounds_down():
    program = [_lv(0, 131), _lv(1, 2), _three(Opcode.DIV, 1, 0, 1), _out(1), _halt()]
    assert _run(program) == b"A"


def test_nand_test1():
    program = [
        _lv(0, 209), _lv(1, 17), _lv(2, 127), _lv(3, 122),
        _three(Opcode.NAND, 4, 0, 1), _three(Opcode.NAND, 5, 2, 3),
        _three(Opcode.NAND, 6, 4, 5), _out(6), _halt(),
    ]
    assert _run(program) == b"{"


def test_input_test1_echoes_input():
    program = []
    for _ in range(5):
        program += [_input(0), _out(0)]
    program += [_input(0), _halt()]
    assert _run(program, b"qwert") == b"qwert"


def test_input_eof_loads_all_ones():
    machine = run([_input(2)], io.BytesIO(b""), io.BytesIO())
    assert machine.registers[2] == 0xFFFFFFFF


def test_loadp_test1_skips_output():
    program = [_lv(0, 65), _lv(1, 0), _lv(2, 5),
               _three(Opcode.LOADP, 0, 1, 2), _out(0), _halt()]
    assert _run(program) == b""


def test_loadp_test2_runs_duplicated_segment():
    program = [
        _lv(0, 65), _lv(5, 5), _three(Opcode.ACTIVATE, 0, 1, 5),
        _lv(2, 29360128), _lv(3, 64), _three(Opcode.MUL, 4, 2, 3),
        _lv(6, 3), _three(Opcode.SSTORE, 1, 6, 4),
        _three(Opcode.LOADP, 0, 1, 6), _out(0), _halt(),
    ]
    assert _run(program) == b""


def test_program_ends_without_halt():
    assert _run([_lv(0, 66), _out(0)]) == b"B"


def test_unknown_opcode_raises():
    with pytest.raises(ValueError):
        _run([15 << 28])


@pytest.fixture
def fake_stdio(monkeypatch):
    stdout = io.TextIOWrapper(io.BytesIO())
    stdin = io.TextIOWrapper(io.BytesIO(b""))
    monkeypatch.setattr(sys, "stdout", stdout)
    monkeypatch.setattr(sys, "stdin", stdin)
    return stdout


def test_main_missing_file(tmp_path, capsys):
    path = tmp_path / "absent.um"
    assert main([str(path)]) == 1
    assert capsys.readouterr().err == f"{path}: No such file or directory\n"


def test_main_runtime_error_returns_failure(tmp_path, fake_stdio):
    path = tmp_path / "div0.um"
    path.write_bytes(_to_bytes([_lv(0, 5), _three(Opcode.DIV, 1, 0, 2), _halt()]))
    assert main([str(path)]) == 1


def test_main_requires_program_argument():
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 2