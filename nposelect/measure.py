"""Measure the quality of election results.

NPoS chains compare competing election solutions by their score, a triple
of the minimal backing of any winner (to be maximized), the sum of all
backings (to be maximized) and the sum of squared backings (to be
minimized, as it penalizes uneven backing). The same score is useful to
compare the outcomes of different algorithms or override scenarios offline.

The functions accept backings as a mapping of validators to their total
backing stake, as returned by :func:`backings`.
"""

from __future__ import annotations

import collections
from fractions import Fraction
from typing import Dict, NamedTuple

from nposelect.result import ElectionResult


class ElectionScore(NamedTuple):
    '''Score of an election solution.'''
    minimal_stake: int
    sum_stake: int
    sum_stake_squared: int

    def is_better_than(self, other: ElectionScore) -> bool:
        '''Compare scores the way the chain does.

        A higher minimal stake wins; on equality a higher sum of stake, then
        a lower sum of squares.
        '''
        return (
            (self.minimal_stake, self.sum_stake, -self.sum_stake_squared)
            > (other.minimal_stake, other.sum_stake, -other.sum_stake_squared)
        )


def backings(result: ElectionResult) -> Dict[str, int]:
    '''Return total backing of each selected validator, in election order.'''
    return collections.OrderedDict(
        (val.account_id, val.total_backing_stake)
        for val in result.selected_validators
    )


def election_score(backing: Dict[str, int]) -> ElectionScore:
    '''Compute the score of an election solution.

    :param backing: Total backing of each winner.
    '''
    values = list(backing.values())
    return ElectionScore(
        minimal_stake=min(values) if values else 0,
        sum_stake=sum(values),
        sum_stake_squared=sum(value ** 2 for value in values),
    )


def gini(backing: Dict[str, int]) -> Fraction:
    """Compute the Gini coefficient of the backing distribution.

    Zero means all winners are backed equally; values approaching one mean
    the backing is concentrated on few winners. Computed exactly.

    :param backing: Total backing of each winner.
    """
    values = sorted(backing.values())
    total = sum(values)
    if not values or total == 0:
        return Fraction(0)
    n = len(values)
    weighted = sum((i + 1) * value for i, value in enumerate(values))
    return Fraction(2 * weighted, n * total) - Fraction(n + 1, n)


def backing_spread(backing: Dict[str, int]) -> int:
    '''Difference between the highest and the lowest backing.'''
    values = list(backing.values())
    return max(values) - min(values) if values else 0
