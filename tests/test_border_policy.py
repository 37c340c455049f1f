"""Tests for border handling strategies."""

import numpy as np
import pytest

from kernelfx.core.border import CLAMP, DROPPED, REFLECT, WRAP, ZERO, get_border_policy
from kernelfx.errors import InvalidParameterError


def test_clamp_to_edge_clamps_each_axis_independently():
    assert CLAMP(-3, 2, 5, 4) == (0, 2)
    assert CLAMP(7, -1, 5, 4) == (4, 0)
    assert CLAMP(2, 9, 5, 4) == (2, 3)


def test_wrap_is_periodic():
    assert WRAP(-1, 5, 5, 4) == (4, 1)
    assert WRAP.resolve_axis(np.array([-6, -5, 0, 5, 11]), 5).tolist() == [4, 0, 0, 0, 1]


def test_reflect_repeats_edge_sample():
    indices = np.arange(-4, 8)
    assert REFLECT.resolve_axis(indices, 4).tolist() == [3, 2, 1, 0, 0, 1, 2, 3, 3, 2, 1, 0]


def test_zero_pad_drops_outside_samples():
    assert ZERO(-1, 0, 3, 3) is None
    assert ZERO(1, 2, 3, 3) == (1, 2)
    assert ZERO.resolve_axis(np.array([-1, 0, 2, 3]), 3).tolist() == [DROPPED, 0, 2, DROPPED]


def test_offset_table_rows_follow_offsets():
    table = CLAMP.offset_table(1, 3)
    assert table.shape == (3, 3)
    assert table.tolist() == [[0, 0, 1], [0, 1, 2], [1, 2, 2]]


def test_single_pixel_axis_always_resolves_to_zero():
    for policy in (CLAMP, WRAP, REFLECT):
        assert policy.offset_table(4, 1).tolist() == [[0]] * 9


def test_get_border_policy_by_name():
    assert get_border_policy(None) is CLAMP
    assert get_border_policy("Wrap") is WRAP
    assert get_border_policy(REFLECT) is REFLECT
    with pytest.raises(InvalidParameterError):
        get_border_policy("mirror-ish")
