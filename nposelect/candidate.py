'''Validator candidates standing for the election.

A candidate is identified by an opaque account identifier (on live chains,
usually an SS58-encoded address, but any unique string works). Its
self-stake takes part in the election as a vote of the candidate for itself,
which is the staking convention of NPoS chains.
'''

from __future__ import annotations

import dataclasses
from typing import Optional

from nposelect.errors import ValidationError
from nposelect.persist import simple_serialization
from nposelect.util import parse_stake


@simple_serialization
@dataclasses.dataclass
class CandidateMetadata:
    '''Informational candidate properties; not used by the algorithms.

    :param commission_rate: Commission the validator charges, in percent
        (0 to 100).
    :param on_chain_status: Free-form status text, e.g. ``active`` or
        ``waiting``.
    '''
    commission_rate: Optional[int] = None
    on_chain_status: Optional[str] = None

    def __post_init__(self):
        if self.commission_rate is not None:
            if (isinstance(self.commission_rate, bool)
                    or not isinstance(self.commission_rate, int)
                    or not 0 <= self.commission_rate <= 100):
                raise ValidationError(
                    f'invalid commission rate: {self.commission_rate!r},'
                    ' must be an integer between 0 and 100',
                    'candidates.metadata.commission_rate'
                )


@simple_serialization
@dataclasses.dataclass
class Candidate:
    '''A validator candidate.

    :param account_id: Unique identifier of the candidate.
    :param stake: Self-stake of the candidate. Can be zero.
    :param metadata: Optional informational properties.
    '''
    account_id: str
    stake: int = 0
    metadata: Optional[CandidateMetadata] = None

    nested_types = {'metadata': CandidateMetadata}

    def __post_init__(self):
        if not isinstance(self.account_id, str) or not self.account_id:
            raise ValidationError(
                f'invalid candidate account ID: {self.account_id!r}',
                'candidates.account_id'
            )
        self.stake = parse_stake(self.stake, 'candidates.stake')
