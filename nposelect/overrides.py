'''What-if overrides of the election dataset.

Overrides replace stakes of candidates or nominators and add or remove
nominations before the election is computed. They are always applied to a
copy of the dataset, so the caller's data stays untouched and a later
execution without overrides reproduces the original result.

Overrides are best-effort: an override naming an identifier that is not in
the dataset is ignored, since overrides are often prepared against
datasets that already exclude some entities.
'''

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, List, Optional, Tuple

from nposelect.dataset import ElectionDataset
from nposelect.errors import ValidationError
from nposelect.persist import simple_serialization
from nposelect.util import parse_stake


logger = logging.getLogger(__name__)

EDGE_ACTIONS: Dict[str, str] = {
    'add': 'add',
    'remove': 'remove',
    'replace': 'replace',
    'modify': 'replace',
}


@simple_serialization
@dataclasses.dataclass
class EdgeModification:
    '''A change of a single nomination (nominator to candidate approval).

    :param action: ``add`` inserts the target if absent, ``remove`` deletes
        it, ``replace`` (also accepted as ``modify``) ensures it is present,
        keeping its position.
    :param nominator_id: Nominator whose targets are changed.
    :param candidate_id: Candidate that is the subject of the change.
    :param weight: Accepted for compatibility with stored override sets;
        has no effect on the election.
    '''
    action: str
    nominator_id: str
    candidate_id: str
    weight: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.action, str) \
                or self.action.lower() not in EDGE_ACTIONS:
            raise ValidationError(
                f'invalid edge action: {self.action!r}, must be one of '
                + ', '.join(EDGE_ACTIONS.keys()),
                'overrides.voting_edges.action'
            )
        self.action = EDGE_ACTIONS[self.action.lower()]
        if self.weight is not None:
            self.weight = parse_stake(
                self.weight, 'overrides.voting_edges.weight'
            )


@simple_serialization
@dataclasses.dataclass
class ElectionOverrides:
    '''A set of hypothetical changes to the election input.

    :param candidate_stakes: Replacement self-stakes keyed by candidate ID.
    :param nominator_stakes: Replacement stakes keyed by nominator ID.
    :param voting_edges: Nomination changes, applied in order.
    :param active_set_size: Replacement for the configured active set size.
    '''
    candidate_stakes: Dict[str, int] = dataclasses.field(default_factory=dict)
    nominator_stakes: Dict[str, int] = dataclasses.field(default_factory=dict)
    voting_edges: List[EdgeModification] = dataclasses.field(
        default_factory=list
    )
    active_set_size: Optional[int] = None

    nested_types = {'voting_edges': EdgeModification}

    def __post_init__(self):
        self.candidate_stakes = {
            account_id: parse_stake(stake, 'overrides.candidate_stakes')
            for account_id, stake in self.candidate_stakes.items()
        }
        self.nominator_stakes = {
            account_id: parse_stake(stake, 'overrides.nominator_stakes')
            for account_id, stake in self.nominator_stakes.items()
        }
        self.voting_edges = list(self.voting_edges)

    def set_candidate_stake(self, account_id: str, stake: int) -> None:
        self.candidate_stakes[account_id] = parse_stake(
            stake, 'overrides.candidate_stakes'
        )

    def set_nominator_stake(self, account_id: str, stake: int) -> None:
        self.nominator_stakes[account_id] = parse_stake(
            stake, 'overrides.nominator_stakes'
        )

    def add_voting_edge(self, nominator_id: str, candidate_id: str) -> None:
        self.voting_edges.append(
            EdgeModification('add', nominator_id, candidate_id)
        )

    def remove_voting_edge(self, nominator_id: str, candidate_id: str) -> None:
        self.voting_edges.append(
            EdgeModification('remove', nominator_id, candidate_id)
        )

    def replace_voting_edge(self,
                            nominator_id: str,
                            candidate_id: str,
                            weight: Optional[int] = None,
                            ) -> None:
        self.voting_edges.append(
            EdgeModification('replace', nominator_id, candidate_id, weight)
        )

    def is_empty(self) -> bool:
        return not (
            self.candidate_stakes
            or self.nominator_stakes
            or self.voting_edges
            or self.active_set_size is not None
        )


def apply_overrides(overrides: Optional[ElectionOverrides],
                    dataset: ElectionDataset,
                    ) -> ElectionDataset:
    '''Apply overrides to a copy of the dataset.

    Stake overrides are applied first, then the edge modifications in
    their order. Identifiers missing from the dataset are skipped.

    :param overrides: Overrides to apply. If None, a plain copy is returned.
    :param dataset: Source dataset; never modified.
    :returns: The modified copy.
    '''
    working = dataset.copy()
    if overrides is None:
        return working
    for account_id, stake in overrides.candidate_stakes.items():
        candidate = working.get_candidate(account_id)
        if candidate is None:
            logger.debug('stake override of unknown candidate %s skipped',
                         account_id)
        else:
            candidate.stake = stake
    for account_id, stake in overrides.nominator_stakes.items():
        nominator = working.get_nominator(account_id)
        if nominator is None:
            logger.debug('stake override of unknown nominator %s skipped',
                         account_id)
        else:
            nominator.stake = stake
    for edge_mod in overrides.voting_edges:
        nominator = working.get_nominator(edge_mod.nominator_id)
        if nominator is None:
            logger.debug('edge override of unknown nominator %s skipped',
                         edge_mod.nominator_id)
            continue
        if edge_mod.action == 'add':
            nominator.add_target(edge_mod.candidate_id)
        elif edge_mod.action == 'remove':
            nominator.remove_target(edge_mod.candidate_id)
        elif edge_mod.candidate_id not in nominator.targets:
            # replacing keeps the position of an existing target
            nominator.add_target(edge_mod.candidate_id)
    return working


def parse_assignment(text: str, field: str) -> Tuple[str, str]:
    '''Split an ``identifier=value`` directive.

    :param text: The directive text.
    :param field: Name of the directive to report in errors.
    :raises ValidationError: If the directive is malformed.
    '''
    parts = text.split('=')
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        raise ValidationError(
            f"Invalid override format: '{text}'. Expected format:"
            ' identifier=value',
            field
        )
    return parts[0].strip(), parts[1].strip()


def parse_stake_directive(text: str, field: str) -> Tuple[str, int]:
    '''Parse an ``account_id=stake`` directive.'''
    account_id, stake_str = parse_assignment(text, field)
    return account_id, parse_stake(stake_str, field)


def from_directives(candidate_stakes: List[str] = (),
                    nominator_stakes: List[str] = (),
                    added_edges: List[str] = (),
                    removed_edges: List[str] = (),
                    ) -> ElectionOverrides:
    '''Build overrides from textual directives as given on a command line.

    Stake directives are ``account_id=stake``, edge directives are
    ``nominator_id=candidate_id``.
    '''
    overrides = ElectionOverrides()
    for text in candidate_stakes:
        overrides.set_candidate_stake(
            *parse_stake_directive(text, 'override_candidate_stake')
        )
    for text in nominator_stakes:
        overrides.set_nominator_stake(
            *parse_stake_directive(text, 'override_nominator_stake')
        )
    for text in added_edges:
        overrides.add_voting_edge(*parse_assignment(text, 'add_edge'))
    for text in removed_edges:
        overrides.remove_voting_edge(*parse_assignment(text, 'remove_edge'))
    return overrides
