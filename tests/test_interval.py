from datetime import timedelta

import pytest

from mycelium.interval import Interval


def test_roundtrip_through_timedelta():
    interval = Interval(400)
    assert Interval.from_timedelta(interval.to_timedelta()) == interval


def test_from_whole_seconds():
    assert Interval.from_timedelta(timedelta(seconds=4)) == Interval(400)


def test_to_timedelta_value():
    assert Interval(400).to_timedelta() == timedelta(seconds=4)


def test_sub_centisecond_precision_is_dropped():
    assert Interval.from_timedelta(timedelta(milliseconds=4009)) == Interval.from_timedelta(
        timedelta(seconds=4)
    )


def test_int_conversion():
    assert int(Interval(513)) == 513


def test_large_duration_wraps_to_16_bits():
    wrapped = Interval.from_timedelta(timedelta(milliseconds=10 * 0x10000) + timedelta(seconds=4))
    assert wrapped == Interval.from_timedelta(timedelta(seconds=4))


def test_negative_duration_rejected():
    with pytest.raises(ValueError):
        Interval.from_timedelta(timedelta(seconds=-1))


@pytest.mark.parametrize("raw", [-1, 0x10000])
def test_out_of_range_raw_value_rejected(raw):
    with pytest.raises(ValueError):
        Interval(raw)


def test_ordering_follows_duration():
    assert Interval(25) < Interval(400)