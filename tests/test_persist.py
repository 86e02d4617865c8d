import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import nposelect.persist
from nposelect.candidate import Candidate, CandidateMetadata
from nposelect.errors import InvalidData
from nposelect.nominator import Nominator


def test_absent_omitted():
    assert Candidate('alice').to_dict() == {'account_id': 'alice', 'stake': 0}
    assert Nominator('bob', 5, metadata={'tag': 'x'}).to_dict() == {
        'account_id': 'bob', 'stake': 5, 'metadata': {'tag': 'x'}
    }


def test_nested():
    candidate = Candidate.from_dict({
        'account_id': 'alice',
        'metadata': {'on_chain_status': 'waiting'},
    })
    assert candidate.metadata == CandidateMetadata(on_chain_status='waiting')
    assert candidate.to_dict()['metadata'] == {'on_chain_status': 'waiting'}


@pytest.mark.parametrize('value', [
    'alice',
    {'stake': 10},
    {'account_id': 'alice', 'commission': 5},
])
def test_invalid(value):
    with pytest.raises(InvalidData):
        Candidate.from_dict(value)


def test_serialize_value():
    assert nposelect.persist.serialize_value(
        {'a': [Candidate('x', 1)]}
    ) == {'a': [{'account_id': 'x', 'stake': 1}]}
    with pytest.raises(ValueError):
        nposelect.persist.serialize_value({1: 'a'})
