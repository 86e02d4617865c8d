import sys
import os
from fractions import Fraction

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import nposelect.util
from nposelect.errors import ValidationError


def test_parse_stake():
    assert nposelect.util.parse_stake(15) == 15
    assert nposelect.util.parse_stake(' 1000 ') == 1000
    with pytest.raises(ValidationError) as excinfo:
        nposelect.util.parse_stake(-3, 'nominators.stake')
    assert excinfo.value.field == 'nominators.stake'


@pytest.mark.parametrize('ratios, expected', [
    ([Fraction(1, 3)] * 3, [4, 3, 3]),
    ([Fraction(1, 2), Fraction(1, 2)], [5, 5]),
    ([Fraction(1, 10), Fraction(9, 10)], [1, 9]),
    ([Fraction(1, 6), Fraction(5, 6)], [2, 8]),
    ([], []),
])
def test_split_integer(ratios, expected):
    parts = nposelect.util.split_integer(10, ratios)
    assert parts == expected


def test_duplicates():
    assert nposelect.util.find_duplicates(['a', 'b', 'a', 'c', 'b']) == [
        'a', 'b'
    ]
    assert nposelect.util.unique_ordered(['b', 'a', 'b']) == ['b', 'a']


def test_abbreviated_list():
    items = [str(i) for i in range(7)]
    assert nposelect.util.abbreviated_list(items[:2]) == '0, 1'
    assert nposelect.util.abbreviated_list(items) == (
        '0, 1, 2, 3, 4 (and 2 more)'
    )
