'''Sequential Phragmén election.

This is the method NPoS chains use to elect their validators. Winners are
elected one at a time; every voter carries a load that grows whenever a
candidate it approves is elected, and each round elects the candidate that
would leave its supporters with the lowest load. The election is followed
by stake balancing among the winners.

All loads and scores are exact fractions. Ties are broken by the
ingestion order of the candidates (earlier wins).
'''

import logging
from fractions import Fraction
from typing import List, Optional

import nposelect.component.balancing
import nposelect.config
import nposelect.util
from nposelect.evaluate.core import (
    Evaluator, CandidateState, Voter, ElectionSolution,
    build_solution, first_unelected, mark_elected,
)
from nposelect.persist import simple_serialization


logger = logging.getLogger(__name__)


@simple_serialization
class SequentialPhragmen(Evaluator):
    '''Sequential Phragmén evaluator. [#seqphr]_

    In each round, the score of a candidate ``c`` approved by voters ``V_c``
    is ``(1 + sum(budget_v * load_v)) / sum(budget_v)`` over ``v`` in
    ``V_c``; the candidate with the lowest score is elected and the loads of
    all its supporters are raised to that score. Candidates with no
    approving stake at all are never preferred over backed ones; they are
    only elected, in ingestion order, once no backed candidate remains.

    After the last round, every voter's stake is split among its winners in
    proportion to the load each of them added, rounded to integers so that
    the split sums exactly to the voter's stake, and balanced.

    .. [#seqphr] "Phragmen's Voting Methods and Justified Representation",
        Brill, Freeman, Janson, Lackner. AAAI 2017.
    '''
    name = nposelect.config.SEQUENTIAL_PHRAGMEN

    def elect(self,
              candidates: List[CandidateState],
              voters: List[Voter],
              n_seats: int,
              ) -> ElectionSolution:
        for round_i in range(n_seats):
            winner = self._next_winner(candidates, voters)
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
            mark_elected(winner, round_i)
            for voter in voters:
                for edge in voter.edges:
                    if edge.candidate is winner:
                        edge.load = winner.score - voter.load
                        voter.load = winner.score
        assign_by_load(voters)
        n_iters = nposelect.component.balancing.balance(
            voters, self.balancing_iterations, self.balancing_tolerance
        )
        logger.info('balanced in %d passes', n_iters)
        return build_solution(candidates, voters, n_iters)

    @staticmethod
    def _next_winner(candidates: List[CandidateState],
                     voters: List[Voter],
                     ) -> Optional[CandidateState]:
        for cand in candidates:
            if not cand.elected and cand.approval_stake > 0:
                cand.score = Fraction(1, cand.approval_stake)
            else:
                cand.score = None
        for voter in voters:
            if voter.load == 0 or voter.budget == 0:
                continue
            for edge in voter.edges:
                cand = edge.candidate
                if cand.score is not None:
                    cand.score += voter.budget * voter.load / cand.approval_stake
        winner = None
        for cand in candidates:
            if cand.score is not None:
                if winner is None or cand.score < winner.score:
                    winner = cand
        return winner


def assign_by_load(voters: List[Voter]) -> None:
    '''Turn Phragmén loads into integer edge weights and backings.

    Each voter's stake is split among its elected edges in proportion to the
    load the edges carry.
    '''
    for voter in voters:
        if voter.load == 0:
            continue
        edges = [
            edge for edge in voter.elected_edges() if edge.load > 0
        ]
        weights = nposelect.util.split_integer(
            voter.budget,
            [edge.load / voter.load for edge in edges]
        )
        for edge, weight in zip(edges, weights):
            edge.weight = weight
            edge.candidate.backed_stake += weight


@simple_serialization
class MultiPhase(SequentialPhragmen):
    '''The election as mined for the multi-phase election provider.

    The multi-phase election provider of NPoS chains accepts solutions from
    several phases, but the solution its miner computes (and the one an
    honest validator submits) is sequential Phragmén followed by
    balancing. Offline, that is the computation performed here; only the
    reported algorithm name differs.
    '''
    name = nposelect.config.MULTI_PHASE
