import pytest

from uringecho.utils import (
    closest_prime,
    is_prime,
    pack_int,
    read_int_from_buffer,
    round_up_pow_2,
)


def test_pack_int_is_big_endian():
    assert pack_int(1) == b"\x00\x00\x00\x01"


def test_pack_int_negative_is_twos_complement():
    assert pack_int(-1) == b"\xff\xff\xff\xff"


@pytest.mark.parametrize("value", [0, 1, -1, 999, 2**31 - 1, -(2**31), 123456])
def test_round_trip(value):
    assert read_int_from_buffer(pack_int(value)) == value


def test_read_with_offset():
    buf = pack_int(5) + pack_int(7)
    assert read_int_from_buffer(buf, 0) == 5
    assert read_int_from_buffer(buf, 4) == 7


def test_read_from_short_buffer_raises():
    with pytest.raises(ValueError):
        read_int_from_buffer(b"\x00\x01")


def test_read_past_end_raises():
    with pytest.raises(ValueError):
        read_int_from_buffer(pack_int(3), 2)


@pytest.mark.parametrize("value", [2**31, -(2**31) - 1])
def test_pack_out_of_range_raises(value):
    with pytest.raises(ValueError):
        pack_int(value)


@pytest.mark.parametrize("n", [-5, 0, 1])
def test_small_numbers_are_not_prime(n):
    assert is_prime(n) is False


def test_two_is_prime():
    assert is_prime(2) is True


@pytest.mark.parametrize("p,q", [(3, 3), (5, 7), (11, 13), (2, 17), (31, 37)])
def test_products_are_not_prime(p, q):
    assert is_prime(p * q) is False


@pytest.mark.parametrize("n", [0, 1, 2, 4, 24, 90, 100, 1000, 1024])
def test_closest_prime_is_prime_and_nearest(n):
    p = closest_prime(n)
    assert p >= n
    assert is_prime(p)
    assert not any(is_prime(k) for k in range(n, p))


def test_closest_prime_of_prime_is_itself():
    p = closest_prime(50)
    assert closest_prime(p) == p


def test_round_up_pow_2_below_one():
    assert round_up_pow_2(0) == 1
    assert round_up_pow_2(-3) == 1


@pytest.mark.parametrize("x", [1, 2, 3, 5, 8, 9, 100, 1023, 1024, 1025, 2**40 + 1])
def test_round_up_pow_2_invariants(x):
    r = round_up_pow_2(x)
    assert r >= x
    assert r & (r - 1) == 0
    assert r // 2 < x


@pytest.mark.parametrize("k", [0, 1, 5, 10, 33])
def test_round_up_pow_2_keeps_powers(k):
    assert round_up_pow_2(1 << k) == 1 << k