import sys
import os
from fractions import Fraction

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import nposelect.evaluate
import nposelect.evaluate.core
import nposelect.evaluate.phragmen
from nposelect.candidate import Candidate
from nposelect.dataset import ElectionDataset
from nposelect.errors import AlgorithmError
from nposelect.nominator import Nominator


def three_way_dataset():
    # candidates without self-stake, each pair of them shares a nominator
    return ElectionDataset(
        candidates=[Candidate('a'), Candidate('b'), Candidate('c')],
        nominators=[
            Nominator('n10', 10, ['a', 'b']),
            Nominator('n20', 20, ['a', 'c']),
            Nominator('n30', 30, ['b', 'c']),
        ],
    )


def distributions(solution):
    return {
        assignment.voter_id: assignment.distribution
        for assignment in solution.assignments
    }


def test_three_way_balanced():
    solution = nposelect.evaluate.phragmen.SequentialPhragmen().evaluate(
        three_way_dataset(), 2
    )
    assert solution.winners == [('c', 30), ('b', 30)]
    assert distributions(solution) == {
        'n10': [('b', 10)],
        'n20': [('c', 20)],
        'n30': [('b', 20), ('c', 10)],
    }
    assert solution.n_balancing_iterations == 2


def test_three_way_unbalanced():
    evaluator = nposelect.evaluate.phragmen.SequentialPhragmen(
        balancing_iterations=0
    )
    solution = evaluator.evaluate(three_way_dataset(), 2)
    assert solution.winners == [('c', 35), ('b', 25)]
    assert distributions(solution)['n30'] == [('b', 15), ('c', 15)]
    assert solution.n_balancing_iterations == 0


def test_self_stake_only():
    dataset = ElectionDataset(candidates=[
        Candidate('low', 100),
        Candidate('high', 300),
        Candidate('mid', 200),
    ])
    solution = nposelect.evaluate.phragmen.SequentialPhragmen().evaluate(
        dataset, 2
    )
    assert solution.winners == [('high', 300), ('mid', 200)]
    assert all(assignment.self_vote for assignment in solution.assignments)


def test_tie_by_ingestion_order():
    dataset = ElectionDataset(candidates=[
        Candidate('first', 100),
        Candidate('second', 100),
    ])
    solution = nposelect.evaluate.phragmen.SequentialPhragmen().evaluate(
        dataset, 1
    )
    assert solution.winners == [('first', 100)]


def test_unbacked_elected_last():
    dataset = ElectionDataset(
        candidates=[Candidate('x'), Candidate('y'), Candidate('z', 50)],
    )
    solution = nposelect.evaluate.phragmen.SequentialPhragmen().evaluate(
        dataset, 2
    )
    assert solution.winners == [('z', 50), ('x', 0)]


def test_all_zero_stake():
    dataset = ElectionDataset(
        candidates=[Candidate('x'), Candidate('y')],
        nominators=[Nominator('n', 0, ['x'])],
    )
    with pytest.raises(AlgorithmError) as excinfo:
        nposelect.evaluate.phragmen.SequentialPhragmen().evaluate(dataset, 1)
    assert excinfo.value.algorithm == 'sequential-phragmen'


def test_loads_exact():
    candidates, voters = nposelect.evaluate.core.build_voter_graph(
        three_way_dataset()
    )
    evaluator = nposelect.evaluate.phragmen.SequentialPhragmen()
    winner = evaluator._next_winner(candidates, voters)
    assert winner.account_id == 'c'
    assert winner.score == Fraction(1, 50)
    assert [cand.score for cand in candidates] == [
        Fraction(1, 30), Fraction(1, 40), Fraction(1, 50)
    ]


def test_voter_graph():
    dataset = three_way_dataset()
    dataset.add_nominator(Nominator('idle', 1000))
    candidates, voters = nposelect.evaluate.core.build_voter_graph(dataset)
    assert [voter.account_id for voter in voters] == [
        'a', 'b', 'c', 'n10', 'n20', 'n30'
    ]
    assert [voter.self_vote for voter in voters[:3]] == [True] * 3
    assert [cand.approval_stake for cand in candidates] == [30, 40, 50]


def test_multi_phase_same_as_sequential():
    sequential = nposelect.evaluate.construct('sequential-phragmen')
    multi_phase = nposelect.evaluate.construct('multi-phase')
    assert multi_phase.name == 'multi-phase'
    assert (
        multi_phase.evaluate(three_way_dataset(), 2)
        == sequential.evaluate(three_way_dataset(), 2)
    )


def test_registry():
    assert (
        nposelect.evaluate.get('phragmms')
        is nposelect.evaluate.phragmms.PhragMMS
    )
    with pytest.raises(KeyError):
        nposelect.evaluate.get('approval')
    evaluator = nposelect.evaluate.construct(
        'sequential-phragmen', balancing_iterations=3
    )
    assert evaluator.balancing_iterations == 3


def test_serialization():
    evaluator = nposelect.evaluate.phragmen.SequentialPhragmen.from_dict(
        {'balancing_iterations': 5}
    )
    assert evaluator.to_dict() == {
        'balancing_iterations': 5,
        'balancing_tolerance': 0,
    }


@pytest.mark.parametrize('tolerance, winners', [
    (5, [('c', 30), ('b', 30)]),
    (20, [('c', 35), ('b', 25)]),
])
def test_balancing_tolerance_on_backing_difference(tolerance, winners):
    # n30 backs both winners whose backing differs by 10 before balancing
    evaluator = nposelect.evaluate.phragmen.SequentialPhragmen(
        balancing_tolerance=tolerance
    )
    assert evaluator.evaluate(three_way_dataset(), 2).winners == winners
