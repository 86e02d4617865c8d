'''PhragMMS election (the parallel greedy max-min support method).

Unlike sequential Phragmén, PhragMMS keeps an explicit stake assignment
during the whole election. In every round it computes, for each remaining
candidate, the highest backing the candidate could reach if its supporters
took stake away from the winners they already back (proportionally to how
much those winners are backed above that level); the candidate with the
highest such score is elected, its supporters actually move the stake, and
the assignment is balanced.

Scores are exact fractions; moved stake is integer. Ties are broken by the
ingestion order of the candidates (earlier wins).
'''

import logging
from fractions import Fraction
from typing import List, Optional

import nposelect.component.balancing
import nposelect.config
from nposelect.evaluate.core import (
    Evaluator, CandidateState, Voter, ElectionSolution,
    build_solution, first_unelected, mark_elected,
)
from nposelect.persist import simple_serialization


logger = logging.getLogger(__name__)


@simple_serialization
class PhragMMS(Evaluator):
    '''PhragMMS evaluator. [#phragmms]_

    The score of an unelected candidate ``c`` is::

        approval_stake(c) / (1 + sum over supporters v of c
                                 of sum over winners w backed by v
                                 of weight(v, w) / backing(w))

    i.e. the backing ``c`` would get if every supporter released the stake
    its winners hold above that level. The candidate with the maximal score
    is elected. Candidates with no approving stake are only elected, in
    ingestion order, once no backed candidate remains.

    Balancing runs after every round, so the final round also leaves a
    balanced assignment.

    .. [#phragmms] "A Verifiably Secure and Proportional Committee Election
        Rule", Cevallos, Stewart. AFT 2021.
    '''
    name = nposelect.config.PHRAGMMS

    def elect(self,
              candidates: List[CandidateState],
              voters: List[Voter],
              n_seats: int,
              ) -> ElectionSolution:
        n_iters = 0
        for round_i in range(n_seats):
            winner = calculate_max_score(candidates, voters)
            if winner is None:
                winner = first_unelected(candidates)
                logger.info('round %d: no backed candidate left,'
                            ' electing %s by ingestion order',
                            round_i + 1, winner.account_id)
                mark_elected(winner, round_i)
                continue
            logger.info('round %d: elected %s', round_i + 1, winner.account_id)
            logger.debug('round %d: winning score %s',
                         round_i + 1, float(winner.score))
            apply_elected(voters, winner)
            mark_elected(winner, round_i)
            n_iters += nposelect.component.balancing.balance(
                voters, self.balancing_iterations, self.balancing_tolerance
            )
        return build_solution(candidates, voters, n_iters)


def calculate_max_score(candidates: List[CandidateState],
                        voters: List[Voter],
                        ) -> Optional[CandidateState]:
    '''Score all unelected candidates and return the best one.

    :returns: The unelected candidate with the highest score (earliest in
        ingestion order on ties), or None if no unelected candidate has any
        approving stake.
    '''
    for cand in candidates:
        cand.score_denominator = Fraction(1)
    for voter in voters:
        contribution = sum(
            (Fraction(edge.weight, edge.candidate.backed_stake)
             for edge in voter.edges
             if edge.candidate.elected and edge.weight > 0),
            Fraction(0)
        )
        if contribution:
            for edge in voter.edges:
                if not edge.candidate.elected:
                    edge.candidate.score_denominator += contribution
    best = None
    for cand in candidates:
        if cand.elected or cand.approval_stake == 0:
            cand.score = None
            continue
        cand.score = cand.approval_stake / cand.score_denominator
        if best is None or cand.score > best.score:
            best = cand
    return best


def apply_elected(voters: List[Voter], winner: CandidateState) -> None:
    '''Move stake of the winner's supporters to the winner.

    Each supporter gives the winner its unused budget plus, from every other
    winner it backs that is backed above the winner's score, the part of its
    stake corresponding to the excess (rounded down).
    '''
    cutoff = winner.score
    for voter in voters:
        new_edge = None
        for edge in voter.edges:
            if edge.candidate is winner:
                new_edge = edge
                break
        if new_edge is None:
            continue
        new_weight = voter.budget - sum(edge.weight for edge in voter.edges)
        for edge in voter.edges:
            if edge is new_edge or edge.weight == 0:
                continue
            backing = edge.candidate.backed_stake
            if backing > cutoff:
                stake_to_take = (
                    edge.weight
                    * (backing * cutoff.denominator - cutoff.numerator)
                    // (backing * cutoff.denominator)
                )
                edge.weight -= stake_to_take
                edge.candidate.backed_stake -= stake_to_take
                new_weight += stake_to_take
        new_edge.weight = new_weight
        winner.backed_stake += new_weight
