'''Election configuration - what to compute and how.

A configuration names the election algorithm, the size of the active set
and the optional overrides. It is validated when it is created and cannot
be changed afterwards, so an invalid configuration never reaches the
algorithms.
'''

from __future__ import annotations

import dataclasses
from typing import Dict, List, Optional

from nposelect.errors import ValidationError, InsufficientCandidates
from nposelect.overrides import ElectionOverrides
from nposelect.persist import simple_serialization


SEQUENTIAL_PHRAGMEN = 'sequential-phragmen'
PHRAGMMS = 'phragmms'
MULTI_PHASE = 'multi-phase'

ALGORITHM_SYNONYMS: Dict[str, List[str]] = {
    SEQUENTIAL_PHRAGMEN: ['sequential', 'seq-phragmen'],
    PHRAGMMS: ['parallel-phragmen', 'parallel'],
    MULTI_PHASE: ['multiphase', 'multi_phase'],
}

DEFAULT_BALANCING_ITERATIONS = 10


def parse_algorithm(name: str) -> str:
    '''Return the canonical name of an algorithm given by any of its names.

    Matching is case-insensitive.

    :raises ValidationError: If the name is not recognized.
    '''
    if isinstance(name, str):
        key = name.strip().lower()
        for canonical, synonyms in ALGORITHM_SYNONYMS.items():
            if key == canonical or key in synonyms:
                return canonical
    raise ValidationError(
        f'Unknown algorithm type: {name}; known: '
        + ', '.join(ALGORITHM_SYNONYMS.keys()),
        'algorithm'
    )


def _check_count(value, field: str, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f'{field} must be an integer, got {value!r}',
                              field)
    if value < minimum:
        if minimum == 1:
            raise ValidationError(f'{field} must be positive, got {value}',
                                  field)
        raise ValidationError(f'{field} must be at least {minimum},'
                              f' got {value}', field)


@simple_serialization
@dataclasses.dataclass(frozen=True)
class ElectionConfiguration:
    '''Validated, immutable election configuration.

    :param algorithm: Algorithm name or any of its synonyms; stored in its
        canonical form.
    :param active_set_size: Number of validators to elect.
    :param overrides: What-if changes of the dataset.
    :param block_number: Block the input state was captured at, recorded in
        the result provenance.
    :param balancing_iterations: Maximum number of balancing (stake
        equalization) passes; zero disables balancing.
    :param balancing_tolerance: Balancing stops once no voter sees a larger
        backing difference among the winners it backs than this.
    '''
    algorithm: str
    active_set_size: int
    overrides: Optional[ElectionOverrides] = None
    block_number: Optional[int] = None
    balancing_iterations: int = DEFAULT_BALANCING_ITERATIONS
    balancing_tolerance: int = 0

    nested_types = {'overrides': ElectionOverrides}

    def __post_init__(self):
        object.__setattr__(self, 'algorithm', parse_algorithm(self.algorithm))
        _check_count(self.active_set_size, 'active_set_size', 1)
        if self.overrides is not None:
            if not isinstance(self.overrides, ElectionOverrides):
                raise ValidationError(
                    f'invalid overrides: {self.overrides!r}', 'overrides'
                )
            if self.overrides.active_set_size is not None:
                _check_count(
                    self.overrides.active_set_size,
                    'overrides.active_set_size', 1
                )
        if self.block_number is not None:
            _check_count(self.block_number, 'block_number', 0)
        _check_count(self.balancing_iterations, 'balancing_iterations', 0)
        _check_count(self.balancing_tolerance, 'balancing_tolerance', 0)

    @classmethod
    def build(cls,
              algorithm: str,
              active_set_size: int,
              overrides: Optional[ElectionOverrides] = None,
              block_number: Optional[int] = None,
              balancing_iterations: int = DEFAULT_BALANCING_ITERATIONS,
              balancing_tolerance: int = 0,
              n_candidates: Optional[int] = None,
              ) -> ElectionConfiguration:
        '''Validate the raw settings and freeze them into a configuration.

        :param n_candidates: If given, also check that the active set can be
            filled from this many candidates.
        :raises ValidationError: If any setting is invalid.
        :raises InsufficientCandidates: If the active set is larger than
            n_candidates.
        '''
        config = cls(
            algorithm=algorithm,
            active_set_size=active_set_size,
            overrides=overrides,
            block_number=block_number,
            balancing_iterations=balancing_iterations,
            balancing_tolerance=balancing_tolerance,
        )
        if n_candidates is not None:
            config.check_candidate_count(n_candidates)
        return config

    @property
    def effective_active_set_size(self) -> int:
        '''Active set size after the overrides are taken into account.'''
        if self.overrides is not None \
                and self.overrides.active_set_size is not None:
            return self.overrides.active_set_size
        return self.active_set_size

    def check_candidate_count(self, n_candidates: int) -> None:
        '''Check that the active set can be filled.

        :raises InsufficientCandidates: If the effective active set size
            exceeds the number of candidates.
        '''
        requested = self.effective_active_set_size
        if requested > n_candidates:
            raise InsufficientCandidates(requested, n_candidates)
