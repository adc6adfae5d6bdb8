from georisk.utils.numeric import clamp, round_half_up, round_int


def test_half_rounds_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(1.5) == 2
    assert round_half_up(2.5) == 3
    assert round_half_up(82.5) == 83


def test_negative_half_rounds_toward_positive():
    assert round_half_up(-0.5) == 0
    assert round_half_up(-1.5) == -1


def test_round_with_digits():
    assert round_half_up(78.8875, 1) == 78.9
    assert round_half_up(11.4, 2) == 11.4


def test_round_int_returns_int():
    value = round_int(52.53)
    assert value == 53
    assert isinstance(value, int)


def test_clamp():
    assert clamp(-3) == 0
    assert clamp(140) == 100
    assert clamp(42.5) == 42.5
    assert clamp(2.0, 0.0, 1.0) == 1.0
