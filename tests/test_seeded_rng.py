import pytest

from seeded_rng import RandomStream, derive_seed


def test_mulberry32_pinned_values():
    # Values the game client produces for seed 12345.
    rng = RandomStream(12345)
    assert rng.next() == 0.9797282677609473
    assert rng.next() == 0.3067522644996643
    assert rng.next() == 0.484205421525985


def test_seed_zero_and_negative_seed_wraps():
    rng = RandomStream(0)
    assert rng.next() == 0.26642920868471265
    assert rng.next() == 0.0003297457005828619
    # -1 and 2**32 - 1 share the same 32-bit state.
    assert RandomStream(-1).next() == RandomStream(0xFFFFFFFF).next() == 0.8964226141106337


def test_same_seed_same_stream():
    a = RandomStream(987)
    b = RandomStream(987)
    assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]


def test_next_in_unit_interval():
    rng = RandomStream(4242)
    for _ in range(2000):
        v = rng.next()
        assert 0.0 <= v < 1.0


def test_next_int_inclusive_bounds():
    rng = RandomStream(7)
    seen = {rng.next_int(3, 5) for _ in range(500)}
    assert seen == {3, 4, 5}


def test_next_int_keeps_float_lower_bound():
    rng = RandomStream(7)
    for _ in range(100):
        v = rng.next_int(0.5, 2.5)
        assert v in (0.5, 1.5, 2.5)


def test_pick():
    rng = RandomStream(99)
    items = ["a", "b", "c"]
    assert {rng.pick(items) for _ in range(200)} == set(items)
    with pytest.raises(ValueError):
        rng.pick([])


def test_random_alias_advances_stream():
    a = RandomStream(5)
    b = RandomStream(5)
    assert a.random() == b.next()


@pytest.mark.parametrize(
    "text,expected",
    [
        ("", 0),
        ("hello", 99162322),
        ("2024-01-15daily", 703937942),
        ("2024_W3weekly", 1746201244),
        # hash is exactly -2**31; abs leaves it outside int32
        ("polygenelubricants", 2147483648),
    ],
)
def test_derive_seed_vectors(text, expected):
    assert derive_seed(text) == expected


def test_derive_seed_salt_is_appended():
    assert derive_seed("2024-01-15", "daily") == derive_seed("2024-01-15daily")


def test_derive_seed_collisions_are_expected():
    assert derive_seed("Aa") == derive_seed("BB") == 2112
