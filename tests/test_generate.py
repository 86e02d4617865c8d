import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import nposelect.generate
from nposelect.errors import ValidationError
from nposelect.generate import SyntheticDatasetBuilder


def test_builder():
    dataset = (
        SyntheticDatasetBuilder()
        .add_candidate('alice', 1000)
        .add_candidate('bob', 500)
        .add_nominator('carol', 300, ['alice'])
        .add_voting_edge('carol', 'bob')
        .add_voting_edge('carol', 'alice')
        .with_metadata(block_number=5)
        .build()
    )
    assert dataset.candidate_ids() == ['alice', 'bob']
    assert dataset.get_nominator('carol').targets == ['alice', 'bob']
    assert dataset.metadata.block_number == 5


def test_builder_duplicates():
    builder = SyntheticDatasetBuilder().add_candidate('alice')
    with pytest.raises(ValidationError) as excinfo:
        builder.add_candidate('alice')
    assert 'Duplicate' in str(excinfo.value)
    builder.add_nominator('carol')
    with pytest.raises(ValidationError):
        builder.add_nominator('carol')


def test_builder_unknown_nominator():
    with pytest.raises(ValidationError) as excinfo:
        SyntheticDatasetBuilder().add_voting_edge('nobody', 'alice')
    assert 'Nominator not found' in str(excinfo.value)


def test_builder_validates():
    builder = (
        SyntheticDatasetBuilder()
        .add_candidate('alice')
        .add_nominator('carol', 10, ['ghost'])
    )
    with pytest.raises(ValidationError):
        builder.build()
    with pytest.raises(ValidationError):
        SyntheticDatasetBuilder().build()


def test_random_reproducible():
    first = nposelect.generate.random_dataset(10, 40, seed=42)
    second = nposelect.generate.random_dataset(10, 40, seed=42)
    assert first == second
    assert first != nposelect.generate.random_dataset(10, 40, seed=43)


def test_random_shape():
    dataset = nposelect.generate.random_dataset(
        5, 30, max_targets=3, min_stake=10, max_stake=20, seed=1
    )
    assert len(dataset.candidates) == 5
    assert len(dataset.nominators) == 30
    for nominator in dataset.nominators:
        assert 1 <= len(nominator.targets) <= 3
        assert 10 <= nominator.stake <= 20


def test_random_invalid():
    with pytest.raises(ValidationError):
        nposelect.generate.random_dataset(0, 10)
    with pytest.raises(ValidationError):
        nposelect.generate.random_dataset(3, 10, min_stake=5, max_stake=1)
