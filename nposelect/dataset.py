'''The election dataset - everything an election is computed from.

The dataset holds candidates and nominators in their ingestion order. That
order matters: it is the tie-break authority of the election algorithms,
so it is preserved through copying and override application.
'''

from __future__ import annotations

import copy
import dataclasses
from typing import Dict, List, Optional

from nposelect.candidate import Candidate
from nposelect.errors import ValidationError
from nposelect.nominator import Nominator
from nposelect.persist import simple_serialization
from nposelect.util import abbreviated_list, find_duplicates


@simple_serialization
@dataclasses.dataclass
class ElectionMetadata:
    '''Provenance of the dataset.

    :param block_number: Block at which the chain state was captured.
    :param chain: Name of the chain the state comes from.
    '''
    block_number: Optional[int] = None
    chain: Optional[str] = None


@simple_serialization
@dataclasses.dataclass
class ElectionDataset:
    '''Candidates and nominators of a single election.

    Construction does not validate the cross-references; call
    :meth:`validate` (the engine does so before every execution).

    :param candidates: Validator candidates in ingestion order.
    :param nominators: Nominators in ingestion order.
    :param metadata: Optional provenance information.
    '''
    candidates: List[Candidate] = dataclasses.field(default_factory=list)
    nominators: List[Nominator] = dataclasses.field(default_factory=list)
    metadata: Optional[ElectionMetadata] = None

    nested_types = {
        'candidates': Candidate,
        'nominators': Nominator,
        'metadata': ElectionMetadata,
    }

    def __post_init__(self):
        self.candidates = list(self.candidates)
        self.nominators = list(self.nominators)

    def add_candidate(self, candidate: Candidate) -> None:
        '''Add a candidate, refusing a duplicate identifier.'''
        if self.get_candidate(candidate.account_id) is not None:
            raise ValidationError(
                f'Duplicate candidate account ID: {candidate.account_id}',
                'candidates'
            )
        self.candidates.append(candidate)

    def add_nominator(self, nominator: Nominator) -> None:
        '''Add a nominator, refusing a duplicate identifier.'''
        if self.get_nominator(nominator.account_id) is not None:
            raise ValidationError(
                f'Duplicate nominator account ID: {nominator.account_id}',
                'nominators'
            )
        self.nominators.append(nominator)

    def get_candidate(self, account_id: str) -> Optional[Candidate]:
        for candidate in self.candidates:
            if candidate.account_id == account_id:
                return candidate
        return None

    def get_nominator(self, account_id: str) -> Optional[Nominator]:
        for nominator in self.nominators:
            if nominator.account_id == account_id:
                return nominator
        return None

    def candidate_ids(self) -> List[str]:
        return [candidate.account_id for candidate in self.candidates]

    def candidate_stakes(self) -> Dict[str, int]:
        return {cand.account_id: cand.stake for cand in self.candidates}

    def total_stake(self) -> int:
        '''Sum of all candidate self-stakes and nominator stakes.'''
        return (
            sum(cand.stake for cand in self.candidates)
            + sum(nom.stake for nom in self.nominators)
        )

    def copy(self) -> ElectionDataset:
        '''Return a fully independent copy of the dataset.'''
        return copy.deepcopy(self)

    def validate(self) -> None:
        '''Check the structural invariants of the dataset.

        :raises ValidationError: If there are no candidates, identifiers
            repeat among candidates or among nominators, or a nominator
            targets a candidate that does not exist.
        '''
        if not self.candidates:
            raise ValidationError(
                'Election data must contain at least one validator'
                ' candidate, but found 0. Please add at least one candidate.',
                'candidates'
            )
        candidate_ids = self.candidate_ids()
        duplicates = find_duplicates(candidate_ids)
        if duplicates:
            raise ValidationError(
                f'Duplicate candidate account ID: {duplicates[0]}',
                'candidates'
            )
        duplicates = find_duplicates(
            nom.account_id for nom in self.nominators
        )
        if duplicates:
            raise ValidationError(
                f'Duplicate nominator account ID: {duplicates[0]}',
                'nominators'
            )
        known = set(candidate_ids)
        for nominator in self.nominators:
            for target in nominator.targets:
                if target not in known:
                    raise ValidationError(
                        f"Nominator '{nominator.account_id}' votes for"
                        f" non-existent candidate '{target}'. Available"
                        ' candidates: ' + abbreviated_list(candidate_ids),
                        'nominators.targets'
                    )
