import pytest

from fnkrt.memops import alignp2, bswap, bswap16, bswap32, bswap64, memcpy, memset


def test_bswap_reverses_bytes():
    assert bswap(b"\x01\x02\x03") == b"\x03\x02\x01"


def test_bswap_is_an_involution():
    data = bytes(range(11))
    assert bswap(bswap(data)) == data


@pytest.mark.parametrize(
    "func,size",
    [(bswap16, 2), (bswap32, 4), (bswap64, 8)],
)
def test_fixed_width_swap_matches_byte_order(func, size):
    value = int.from_bytes(bytes(range(1, size + 1)), "big")
    swapped = func(value)
    assert swapped.to_bytes(size, "big") == value.to_bytes(size, "little")
    assert func(swapped) == value


def test_bswap16_pinned_value():
    assert bswap16(0x1234) == 0x3412


def test_fixed_width_swap_truncates_like_unsigned():
    assert bswap16(0x1_0000 | 0xAB) == bswap16(0xAB)


@pytest.mark.parametrize("toalign", [1, 2, 4, 8, 16, 4096])
@pytest.mark.parametrize("value", [0, 1, 7, 8, 9, 100, 4095, 4097])
def test_alignp2_invariants(value, toalign):
    aligned = alignp2(value, toalign)
    assert aligned % toalign == 0
    assert value <= aligned < value + toalign


def test_alignp2_keeps_aligned_values():
    assert alignp2(64, 8) == 64


def test_memcpy_copies_prefix_only():
    dest = bytearray(b"xxxxxxxx")
    memcpy(dest, b"abcdefgh", 5)
    assert dest == bytearray(b"abcdexxx")


def test_memcpy_into_memoryview_slice():
    dest = bytearray(10)
    memcpy(memoryview(dest)[3:], b"hello", 5)
    assert bytes(dest[3:8]) == b"hello"
    assert dest[:3] == bytearray(3)


def test_memcpy_rejects_overlong_length():
    with pytest.raises(ValueError):
        memcpy(bytearray(2), b"abcd", 3)


def test_memset_fills_prefix():
    dest = bytearray(b"\x01" * 6)
    memset(dest, 0xAA, 4)
    assert dest == bytearray(b"\xaa" * 4 + b"\x01" * 2)


def test_memset_rejects_overlong_length():
    with pytest.raises(ValueError):
        memset(bytearray(3), 0, 4)