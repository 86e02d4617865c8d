import sys
import os
from fractions import Fraction

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import nposelect.evaluate.core
import nposelect.evaluate.phragmms
from nposelect.candidate import Candidate
from nposelect.dataset import ElectionDataset
from nposelect.errors import AlgorithmError
from nposelect.nominator import Nominator


def three_way_dataset():
    return ElectionDataset(
        candidates=[Candidate('a'), Candidate('b'), Candidate('c')],
        nominators=[
            Nominator('n10', 10, ['a', 'b']),
            Nominator('n20', 20, ['a', 'c']),
            Nominator('n30', 30, ['b', 'c']),
        ],
    )


def test_three_way():
    solution = nposelect.evaluate.phragmms.PhragMMS().evaluate(
        three_way_dataset(), 2
    )
    assert solution.winners == [('c', 30), ('b', 30)]
    assert {
        assignment.voter_id: assignment.distribution
        for assignment in solution.assignments
    } == {
        'n10': [('b', 10)],
        'n20': [('c', 20)],
        'n30': [('b', 20), ('c', 10)],
    }


def test_scores_after_first_round():
    candidates, voters = nposelect.evaluate.core.build_voter_graph(
        three_way_dataset()
    )
    first = nposelect.evaluate.phragmms.calculate_max_score(
        candidates, voters
    )
    assert first.account_id == 'c'
    assert first.score == 50
    nposelect.evaluate.phragmms.apply_elected(voters, first)
    nposelect.evaluate.core.mark_elected(first, 0)
    assert first.backed_stake == 50
    second = nposelect.evaluate.phragmms.calculate_max_score(
        candidates, voters
    )
    assert second.account_id == 'b'
    assert second.score == 25
    assert candidates[0].score == Fraction(150, 7)
    assert candidates[2].score is None


def test_apply_elected_takes_excess():
    candidates, voters = nposelect.evaluate.core.build_voter_graph(
        three_way_dataset()
    )
    for round_i in range(2):
        winner = nposelect.evaluate.phragmms.calculate_max_score(
            candidates, voters
        )
        nposelect.evaluate.phragmms.apply_elected(voters, winner)
        nposelect.evaluate.core.mark_elected(winner, round_i)
    # n30 moves half of its stake from c (backed 50) to b (score 25)
    assert [cand.backed_stake for cand in candidates] == [0, 25, 35]
    assert [edge.weight for edge in voters[-1].edges] == [15, 15]


def test_self_stake_only():
    dataset = ElectionDataset(candidates=[
        Candidate('low', 100),
        Candidate('high', 300),
        Candidate('mid', 200),
    ])
    solution = nposelect.evaluate.phragmms.PhragMMS().evaluate(dataset, 2)
    assert solution.winners == [('high', 300), ('mid', 200)]


def test_tie_by_ingestion_order():
    dataset = ElectionDataset(
        candidates=[Candidate('first'), Candidate('second')],
        nominators=[Nominator('n', 40, ['second', 'first'])],
    )
    solution = nposelect.evaluate.phragmms.PhragMMS().evaluate(dataset, 1)
    assert solution.winners == [('first', 40)]


def test_all_zero_stake():
    dataset = ElectionDataset(candidates=[Candidate('x'), Candidate('y')])
    with pytest.raises(AlgorithmError) as excinfo:
        nposelect.evaluate.phragmms.PhragMMS().evaluate(dataset, 2)
    assert excinfo.value.algorithm == 'phragmms'
