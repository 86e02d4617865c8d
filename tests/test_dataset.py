import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
from nposelect.candidate import Candidate, CandidateMetadata
from nposelect.dataset import ElectionDataset, ElectionMetadata
from nposelect.errors import ValidationError
from nposelect.nominator import Nominator


def test_candidate_stake_parsing():
    assert Candidate('alice', '1000000000000').stake == 10 ** 12
    assert Candidate('bob').stake == 0


@pytest.mark.parametrize('stake', [-1, 1.5, True, 'lots'])
def test_candidate_invalid_stake(stake):
    with pytest.raises(ValidationError) as excinfo:
        Candidate('alice', stake)
    assert excinfo.value.field == 'candidates.stake'


def test_candidate_invalid_id():
    with pytest.raises(ValidationError):
        Candidate('')


def test_commission_rate():
    assert CandidateMetadata(commission_rate=5).commission_rate == 5
    with pytest.raises(ValidationError):
        CandidateMetadata(commission_rate=101)


def test_nominator_targets():
    nominator = Nominator('nom', 10, ['a', 'b', 'a'])
    assert nominator.targets == ['a', 'b']
    nominator.add_target('c')
    nominator.add_target('a')
    assert nominator.targets == ['a', 'b', 'c']
    nominator.remove_target('b')
    nominator.remove_target('x')
    assert nominator.targets == ['a', 'c']


def test_nominator_string_targets():
    with pytest.raises(ValidationError):
        Nominator('nom', 10, 'abc')


def test_duplicate_candidate():
    dataset = ElectionDataset()
    dataset.add_candidate(Candidate('alice', 10))
    with pytest.raises(ValidationError) as excinfo:
        dataset.add_candidate(Candidate('alice', 20))
    assert 'Duplicate candidate account ID: alice' in str(excinfo.value)
    assert excinfo.value.field == 'candidates'


def test_duplicate_nominator():
    dataset = ElectionDataset(
        candidates=[Candidate('alice')],
        nominators=[Nominator('n', 1, ['alice']), Nominator('n', 2)],
    )
    with pytest.raises(ValidationError) as excinfo:
        dataset.validate()
    assert excinfo.value.field == 'nominators'


def test_no_candidates():
    with pytest.raises(ValidationError) as excinfo:
        ElectionDataset(nominators=[Nominator('n', 1)]).validate()
    assert 'at least one validator candidate' in str(excinfo.value)


def test_nonexistent_target():
    dataset = ElectionDataset(
        candidates=[Candidate('alice', 100)],
        nominators=[Nominator('nom', 50, ['alice', 'ghost'])],
    )
    with pytest.raises(ValidationError) as excinfo:
        dataset.validate()
    message = str(excinfo.value)
    assert 'non-existent' in message
    assert 'ghost' in message
    assert 'nom' in message
    assert excinfo.value.field == 'nominators.targets'


def test_lookups():
    dataset = ElectionDataset(
        candidates=[Candidate('alice', 100), Candidate('bob', 200)],
        nominators=[Nominator('nom', 50, ['bob'])],
        metadata=ElectionMetadata(block_number=123, chain='polkadot'),
    )
    dataset.validate()
    assert dataset.candidate_ids() == ['alice', 'bob']
    assert dataset.candidate_stakes() == {'alice': 100, 'bob': 200}
    assert dataset.get_nominator('nom').stake == 50
    assert dataset.get_candidate('carol') is None
    assert dataset.total_stake() == 350


def test_copy_independent():
    dataset = ElectionDataset(
        candidates=[Candidate('alice', 100)],
        nominators=[Nominator('nom', 50, ['alice'])],
    )
    duplicate = dataset.copy()
    duplicate.candidates[0].stake = 1
    duplicate.nominators[0].remove_target('alice')
    assert dataset.candidates[0].stake == 100
    assert dataset.nominators[0].targets == ['alice']
    assert duplicate != dataset


@pytest.mark.parametrize('targets', [5, [['alice']], [1, 'alice'], None])
def test_nominator_malformed_targets(targets):
    with pytest.raises(ValidationError) as excinfo:
        Nominator('nom', 10, targets)
    assert excinfo.value.field == 'nominators.targets'
