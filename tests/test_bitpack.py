import pytest

from umachine.bitpack import (
    BitpackOverflow,
    fitss,
    fitsu,
    gets,
    getu,
    news,
    newu,
)


def test_fitsu_limits():
    assert fitsu(255, 8)
    assert not fitsu(256, 8)
    assert fitsu(0, 0)
    assert not fitsu(1, 0)
    assert fitsu(2**64 - 1, 64)


def test_fitss_limits():
    assert fitss(127, 8)
    assert fitss(-128, 8)
    assert not fitss(128, 8)
    assert not fitss(-129, 8)
    assert fitss(0, 0)
    assert not fitss(-1, 0)


def test_width_over_64_rejected():
    with pytest.raises(ValueError):
        fitsu(1, 65)
    with pytest.raises(ValueError):
        getu(0, 8, 60)


def test_opcode_field_of_instruction():
    # 0x20000011 is the raw instruction the unit-test generator hard-codes.
    assert getu(0x20000011, 4, 28) == 2


@pytest.mark.parametrize("width,lsb,value", [(8, 0, 200), (4, 28, 13), (25, 0, 2**25 - 1), (64, 0, 2**64 - 1)])
def test_newu_getu_round_trip(width, lsb, value):
    word = newu(0xFFFF_FFFF_FFFF_FFFF, width, lsb, value)
    assert getu(word, width, lsb) == value


def test_newu_leaves_other_bits_alone():
    original = 0xDEADBEEFCAFEBABE
    word = newu(original, 8, 16, 0)
    assert getu(word, 16, 0) == getu(original, 16, 0)
    assert getu(word, 40, 24) == getu(original, 40, 24)


@pytest.mark.parametrize("value", [-8, -1, 0, 3, 7])
def test_news_gets_round_trip(value):
    word = news(0, 4, 10, value)
    assert gets(word, 4, 10) == value


def test_gets_width_zero_is_zero():
    assert gets(2**64 - 1, 0, 5) == 0


def test_gets_sign_extends():
    assert gets(0xF0, 4, 4) == -1


def test_newu_overflow():
    with pytest.raises(BitpackOverflow):
        newu(0, 3, 0, 8)


def test_news_overflow():
    with pytest.raises(BitpackOverflow):
        news(0, 4, 0, 8)
    with pytest.raises(BitpackOverflow):
        news(0, 4, 0, -9)