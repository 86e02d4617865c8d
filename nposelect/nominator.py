'''Nominators - stakeholders backing validator candidates.

A nominator approves a list of candidates (its targets) and lets the
election decide how its stake is spread among those of them that win.
A nominator with no targets is valid; it simply takes no part.
'''

from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Optional

from nposelect.errors import ValidationError
from nposelect.persist import simple_serialization
from nposelect.util import parse_stake, unique_ordered


@simple_serialization
@dataclasses.dataclass
class Nominator:
    '''A nominator and its approvals.

    :param account_id: Unique identifier of the nominator.
    :param stake: Stake the nominator can distribute among its targets.
    :param targets: Identifiers of approved candidates. Repeated targets are
        dropped, keeping the first occurrence.
    :param metadata: Optional free-form properties.
    '''
    account_id: str
    stake: int = 0
    targets: List[str] = dataclasses.field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if not isinstance(self.account_id, str) or not self.account_id:
            raise ValidationError(
                f'invalid nominator account ID: {self.account_id!r}',
                'nominators.account_id'
            )
        self.stake = parse_stake(self.stake, 'nominators.stake')
        if not isinstance(self.targets, (list, tuple)) \
                or not all(isinstance(target, str) for target in self.targets):
            raise ValidationError(
                f'targets of nominator {self.account_id!r} must be a list'
                f' of candidate IDs, got {self.targets!r}',
                'nominators.targets'
            )
        self.targets = unique_ordered(self.targets)
        if self.metadata is not None and not isinstance(self.metadata, dict):
            raise ValidationError(
                f'metadata of nominator {self.account_id!r} must be a mapping',
                'nominators.metadata'
            )

    def add_target(self, candidate_id: str) -> None:
        '''Approve a candidate; no-op if already approved.'''
        if candidate_id not in self.targets:
            self.targets.append(candidate_id)

    def remove_target(self, candidate_id: str) -> None:
        '''Withdraw approval of a candidate; no-op if not approved.'''
        self.targets = [
            target for target in self.targets if target != candidate_id
        ]
