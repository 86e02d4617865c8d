'''General election evaluator machinery.

The evaluators work on a voter graph built from the dataset: every
candidate votes for itself with its self-stake, and every nominator with at
least one target votes for its targets with its stake. The graph is private
to a single evaluation; the dataset itself is only read.
'''

from __future__ import annotations

import abc
import dataclasses
import logging
from fractions import Fraction
from typing import List, Tuple, Optional

from nposelect.dataset import ElectionDataset
from nposelect.errors import AlgorithmError


logger = logging.getLogger(__name__)


class CandidateState:
    '''Election state of one candidate.

    :param account_id: Identifier of the candidate.
    :param index: Position of the candidate in ingestion order; the
        tie-break authority.
    '''
    def __init__(self, account_id: str, index: int):
        self.account_id = account_id
        self.index = index
        self.approval_stake = 0
        self.backed_stake = 0
        self.elected = False
        self.round: Optional[int] = None
        self.score: Optional[Fraction] = None
        self.score_denominator = Fraction(1)

    def __repr__(self):
        return f'<CandidateState {self.account_id} #{self.index}>'


class Edge:
    '''An approval of a candidate by a voter.

    ``load`` is used by sequential Phragmén, ``weight`` holds the integer
    stake the voter currently assigns to the candidate.
    '''
    def __init__(self, candidate: CandidateState):
        self.candidate = candidate
        self.load = Fraction(0)
        self.weight = 0


class Voter:
    '''A stake holder taking part in the election.

    :param account_id: Identifier of the nominator or candidate.
    :param budget: Stake of the voter.
    :param edges: Approvals of the voter.
    :param self_vote: Whether this is the self-vote of a candidate.
    '''
    def __init__(self,
                 account_id: str,
                 budget: int,
                 edges: List[Edge],
                 self_vote: bool = False,
                 ):
        self.account_id = account_id
        self.budget = budget
        self.edges = edges
        self.self_vote = self_vote
        self.load = Fraction(0)

    def elected_edges(self) -> List[Edge]:
        return [edge for edge in self.edges if edge.candidate.elected]


@dataclasses.dataclass
class Assignment:
    '''Integer stake of one voter spread over the winners it backs.'''
    voter_id: str
    stake: int
    distribution: List[Tuple[str, int]]
    self_vote: bool = False


@dataclasses.dataclass
class ElectionSolution:
    '''Raw output of an evaluator.

    :param winners: Winner identifiers with their total backing, in the order
        they were elected.
    :param assignments: Stake assignments of voters backing any winner.
    :param n_balancing_iterations: Balancing passes performed in total.
    '''
    winners: List[Tuple[str, int]]
    assignments: List[Assignment]
    n_balancing_iterations: int = 0


def build_voter_graph(dataset: ElectionDataset,
                      ) -> Tuple[List[CandidateState], List[Voter]]:
    '''Create candidate states and voters from the dataset.

    Candidates keep their ingestion order. Nominators without targets are
    left out. Approval stakes of candidates are summed up.
    '''
    candidates = [
        CandidateState(cand.account_id, i)
        for i, cand in enumerate(dataset.candidates)
    ]
    lookup = {state.account_id: state for state in candidates}
    voters = []
    for cand, state in zip(dataset.candidates, candidates):
        voters.append(Voter(cand.account_id, cand.stake, [Edge(state)],
                            self_vote=True))
    for nominator in dataset.nominators:
        edges = [
            Edge(lookup[target]) for target in nominator.targets
            if target in lookup
        ]
        if edges:
            voters.append(Voter(nominator.account_id, nominator.stake, edges))
    for voter in voters:
        for edge in voter.edges:
            edge.candidate.approval_stake += voter.budget
    return candidates, voters


def build_solution(candidates: List[CandidateState],
                   voters: List[Voter],
                   n_balancing_iterations: int = 0,
                   ) -> ElectionSolution:
    '''Collect winners and assignments from the final edge weights.'''
    elected = sorted(
        (cand for cand in candidates if cand.elected),
        key=lambda cand: cand.round
    )
    assignments = []
    for voter in voters:
        distribution = [
            (edge.candidate.account_id, edge.weight)
            for edge in voter.edges
            if edge.candidate.elected and edge.weight > 0
        ]
        if distribution:
            assignments.append(Assignment(
                voter.account_id,
                voter.budget,
                distribution,
                self_vote=voter.self_vote,
            ))
    return ElectionSolution(
        winners=[(cand.account_id, cand.backed_stake) for cand in elected],
        assignments=assignments,
        n_balancing_iterations=n_balancing_iterations,
    )


def first_unelected(candidates: List[CandidateState]
                    ) -> Optional[CandidateState]:
    '''Return the earliest ingested candidate not yet elected.'''
    for cand in candidates:
        if not cand.elected:
            return cand
    return None


def mark_elected(candidate: CandidateState, round_i: int) -> None:
    candidate.elected = True
    candidate.round = round_i


class Evaluator(metaclass=abc.ABCMeta):
    '''Select validators and assign stake to them.

    A root abstract base class for all election algorithms. Subclasses
    define ``name``, the canonical algorithm name, and implement
    :meth:`elect` on the voter graph.

    :param balancing_iterations: Maximum number of balancing passes.
    :param balancing_tolerance: Balancing stops once no voter sees a larger
        backing difference among the winners it backs than this.
    '''
    name: str = NotImplemented

    def __init__(self,
                 balancing_iterations: int = 10,
                 balancing_tolerance: int = 0,
                 ):
        self.balancing_iterations = balancing_iterations
        self.balancing_tolerance = balancing_tolerance

    def evaluate(self,
                 dataset: ElectionDataset,
                 n_seats: int,
                 ) -> ElectionSolution:
        '''Elect n_seats validators from the dataset.

        :param dataset: Validated election dataset.
        :param n_seats: Number of validators to elect; must not exceed the
            number of candidates.
        :raises AlgorithmError: If the input is degenerate (no stake at all)
            or the algorithm could not fill all seats.
        '''
        candidates, voters = build_voter_graph(dataset)
        if not any(cand.approval_stake > 0 for cand in candidates):
            raise AlgorithmError(
                'all candidate and nominator stakes are zero,'
                ' no candidate can be ranked',
                self.name
            )
        logger.info('%s: electing %d of %d candidates with %d voters',
                    self.name, n_seats, len(candidates), len(voters))
        solution = self.elect(candidates, voters, n_seats)
        if len(solution.winners) != n_seats:
            raise AlgorithmError(
                f'elected {len(solution.winners)} candidates'
                f' instead of {n_seats}',
                self.name
            )
        return solution

    @abc.abstractmethod
    def elect(self,
              candidates: List[CandidateState],
              voters: List[Voter],
              n_seats: int,
              ) -> ElectionSolution:
        raise NotImplementedError
