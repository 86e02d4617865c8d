'''Stake balancing (equalization) among already elected validators.

Once the winners are fixed, every voter backing more than one winner can
move its stake between them. Balancing repeatedly lets each voter withdraw
its stake and pour it back into the winners it backs, least backed first,
levelling their total backing as far as its budget allows. The winner set
never changes, only the attribution of stake.

All amounts are integers, so the outcome is exact and reproducible. The
stake lost to integer division when splitting evenly stays with the least
backed winner of the voter, so every voter's assignment keeps summing to
its full budget.
'''

import logging
from typing import List

from nposelect.evaluate.core import Voter


logger = logging.getLogger(__name__)


def balance(voters: List[Voter],
            iterations: int,
            tolerance: int = 0,
            ) -> int:
    '''Balance the stake of all voters among the elected candidates.

    :param voters: Voters with integer edge weights assigned.
    :param iterations: Maximum number of passes over all voters.
    :param tolerance: Stop once no voter sees a larger backing difference
        among its winners than this.
    :returns: Number of passes performed.
    '''
    for iter_i in range(iterations):
        max_difference = 0
        for voter in voters:
            difference = balance_voter(voter, tolerance)
            if difference > max_difference:
                max_difference = difference
        logger.debug('balancing pass %d: max difference %d',
                     iter_i + 1, max_difference)
        if max_difference <= tolerance:
            return iter_i + 1
    return iterations


def balance_voter(voter: Voter, tolerance: int = 0) -> int:
    '''Rebalance the stake of a single voter.

    :returns: The backing difference among the voter's winners seen before
        rebalancing (the whole budget if none of them had any stake from
        the voter).
    '''
    elected_edges = voter.elected_edges()
    if len(elected_edges) <= 1:
        return 0
    stake_used = sum(edge.weight for edge in elected_edges)
    backings = [
        edge.candidate.backed_stake
        for edge in elected_edges if edge.weight > 0
    ]
    if backings:
        difference = max(backings) - min(backings)
        if stake_used < voter.budget:
            difference += voter.budget - stake_used
        if difference < tolerance:
            return difference
    else:
        difference = voter.budget

    for edge in elected_edges:
        edge.candidate.backed_stake -= edge.weight
        edge.weight = 0
    elected_edges.sort(
        key=lambda edge: (edge.candidate.backed_stake, edge.candidate.index)
    )
    cumulative_backing = 0
    last_index = len(elected_edges) - 1
    for index, edge in enumerate(elected_edges):
        backing = edge.candidate.backed_stake
        if backing * index - cumulative_backing > voter.budget:
            last_index = index - 1
            break
        cumulative_backing += backing
    last_backing = elected_edges[last_index].candidate.backed_stake
    n_ways = last_index + 1
    excess = voter.budget + cumulative_backing - last_backing * n_ways
    share, dust = divmod(excess, n_ways)
    for edge in elected_edges[:n_ways]:
        edge.weight = share + last_backing - edge.candidate.backed_stake
    elected_edges[0].weight += dust
    for edge in elected_edges[:n_ways]:
        edge.candidate.backed_stake += edge.weight
    return difference
