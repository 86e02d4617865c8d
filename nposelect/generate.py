"""Generate election datasets for simulations.

:class:`SyntheticDatasetBuilder` assembles a dataset entity by entity, which
allows hypothetical accounts that do not exist on any chain.
:func:`random_dataset` produces random but reproducible datasets of a given
size, useful to study the algorithms' behaviour and performance.
"""

from __future__ import annotations

import random
from typing import List, Optional, Tuple

from nposelect.candidate import Candidate
from nposelect.dataset import ElectionDataset, ElectionMetadata
from nposelect.errors import ValidationError
from nposelect.nominator import Nominator


class SyntheticDatasetBuilder:
    """Build an election dataset programmatically.

    All adding methods return the builder so that calls can be chained.
    Duplicate identifiers are refused immediately; references to candidates
    are only checked by :meth:`build`.
    """
    def __init__(self):
        self.candidates: List[Tuple[str, int]] = []
        self.nominators: List[Tuple[str, int, List[str]]] = []
        self.metadata: Optional[ElectionMetadata] = None

    def add_candidate(self,
                      account_id: str,
                      stake: int = 0,
                      ) -> SyntheticDatasetBuilder:
        if any(cand_id == account_id for cand_id, _ in self.candidates):
            raise ValidationError(
                f'Duplicate candidate account ID: {account_id}', 'candidates'
            )
        self.candidates.append((account_id, stake))
        return self

    def add_nominator(self,
                      account_id: str,
                      stake: int = 0,
                      targets: Optional[List[str]] = None,
                      ) -> SyntheticDatasetBuilder:
        if any(nom[0] == account_id for nom in self.nominators):
            raise ValidationError(
                f'Duplicate nominator account ID: {account_id}', 'nominators'
            )
        self.nominators.append(
            (account_id, stake, list(targets) if targets else [])
        )
        return self

    def add_voting_edge(self,
                        nominator_id: str,
                        candidate_id: str,
                        ) -> SyntheticDatasetBuilder:
        """Make an already added nominator approve a candidate."""
        for account_id, _, targets in self.nominators:
            if account_id == nominator_id:
                if candidate_id not in targets:
                    targets.append(candidate_id)
                return self
        raise ValidationError(
            f'Nominator not found: {nominator_id}', 'nominators'
        )

    def with_metadata(self,
                      block_number: Optional[int] = None,
                      chain: Optional[str] = None,
                      ) -> SyntheticDatasetBuilder:
        self.metadata = ElectionMetadata(block_number, chain)
        return self

    def build(self) -> ElectionDataset:
        """Create and validate the dataset.

        :raises ValidationError: If the collected entities do not form a
            valid dataset.
        """
        dataset = ElectionDataset(metadata=self.metadata)
        for account_id, stake in self.candidates:
            dataset.add_candidate(Candidate(account_id, stake))
        for account_id, stake, targets in self.nominators:
            dataset.add_nominator(Nominator(account_id, stake, list(targets)))
        dataset.validate()
        return dataset


def random_dataset(n_candidates: int,
                   n_nominators: int,
                   max_targets: int = 16,
                   min_stake: int = 1,
                   max_stake: int = 10 ** 12,
                   seed: Optional[int] = None,
                   ) -> ElectionDataset:
    """Generate a random election dataset.

    Stakes are drawn uniformly from the given range; each nominator
    approves between one and max_targets distinct random candidates.
    The same seed always gives the same dataset.

    :param n_candidates: Number of candidates, at least one.
    :param n_nominators: Number of nominators.
    :param max_targets: Maximum number of targets per nominator.
    :param min_stake: Minimum stake of any entity.
    :param max_stake: Maximum stake of any entity.
    :param seed: Seed of the random generator.
    """
    if n_candidates < 1:
        raise ValidationError('at least one candidate must be generated',
                              'n_candidates')
    if n_nominators < 0:
        raise ValidationError('number of nominators must not be negative',
                              'n_nominators')
    if not 0 <= min_stake <= max_stake:
        raise ValidationError(
            f'invalid stake range: {min_stake} to {max_stake}', 'stake'
        )
    rng = random.Random(seed)
    builder = SyntheticDatasetBuilder()
    candidate_ids = [f'candidate-{i}' for i in range(n_candidates)]
    for cand_id in candidate_ids:
        builder.add_candidate(cand_id, rng.randint(min_stake, max_stake))
    n_max_targets = max(1, min(max_targets, n_candidates))
    for i in range(n_nominators):
        n_targets = rng.randint(1, n_max_targets)
        builder.add_nominator(
            f'nominator-{i}',
            rng.randint(min_stake, max_stake),
            rng.sample(candidate_ids, n_targets),
        )
    return builder.build()
