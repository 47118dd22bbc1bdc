import pytest

from qrengine.galois import GF256, build_field, gf_divide, gf_multiply


def test_tables_are_immutable_and_complete() -> None:
    assert isinstance(GF256.exp, tuple)
    assert isinstance(GF256.log, tuple)
    assert len(GF256.exp) == 256
    assert len(GF256.log) == 256


def test_exp_table_wraps_around() -> None:
    assert GF256.exp[0] == 1
    assert GF256.exp[255] == GF256.exp[0]
    assert GF256.exp[7] == 128
    assert GF256.exp[8] == 0x1D


def test_exp_covers_every_nonzero_element_once() -> None:
    assert sorted(GF256.exp[:255]) == list(range(1, 256))


def test_log_inverts_exp() -> None:
    for value in range(1, 256):
        assert GF256.exp[GF256.log[value]] == value


def test_multiply_by_zero() -> None:
    assert gf_multiply(0, 77) == 0
    assert gf_multiply(77, 0) == 0


def test_multiply_reduces_by_primitive_polynomial() -> None:
    assert gf_multiply(2, 128) == 0x1D
    assert gf_multiply(3, 7) == 9


@pytest.mark.parametrize("a,b", [(1, 1), (2, 3), (57, 201), (255, 255), (17, 128)])
def test_multiply_commutes_and_divides_back(a: int, b: int) -> None:
    product = gf_multiply(a, b)
    assert product == gf_multiply(b, a)
    assert gf_divide(product, b) == a


def test_divide_by_zero() -> None:
    with pytest.raises(ZeroDivisionError):
        gf_divide(5, 0)
    assert gf_divide(0, 5) == 0


def test_build_field_is_deterministic() -> None:
    assert build_field() == GF256
