'''Election results and their final consistency checks.

The result is the public output of an election execution: the selected
validators in election order with their backing, and the allocation of
every participating stake holder's stake. Results are immutable once
produced.

Candidates' self-stake takes part in the election as a vote of the
candidate for itself; it therefore appears in the stake distribution with
the candidate's own identifier as ``nominator_id``, but is not counted
among the validator's nominators.
'''

from __future__ import annotations

import collections
import dataclasses
import json
from fractions import Fraction
from typing import Dict, List, Optional, Tuple

from nposelect.errors import AlgorithmError
from nposelect.evaluate.core import ElectionSolution
from nposelect.persist import simple_serialization


@simple_serialization
@dataclasses.dataclass(frozen=True)
class SelectedValidator:
    '''A validator elected into the active set.

    :param account_id: Identifier of the validator.
    :param total_backing_stake: Total stake assigned to the validator,
        including its self-stake.
    :param nominator_count: Number of distinct nominators assigning any
        stake to the validator.
    :param rank: One-based position in the election order.
    '''
    account_id: str
    total_backing_stake: int
    nominator_count: int
    rank: Optional[int] = None


@simple_serialization
@dataclasses.dataclass(frozen=True)
class StakeAllocation:
    '''Part of a stake holder's stake assigned to one validator.

    :param nominator_id: Identifier of the stake holder (the validator
        itself for its self-stake).
    :param validator_id: Identifier of the validator receiving the stake.
    :param amount: Amount of stake assigned.
    :param proportion: Share of the holder's stake, between 0 and 1. For
        display only; ``amount`` is authoritative.
    '''
    nominator_id: str
    validator_id: str
    amount: int
    proportion: float


@simple_serialization
@dataclasses.dataclass(frozen=True)
class ExecutionMetadata:
    '''Circumstances of the election execution.

    :param block_number: Block the input state was captured at.
    :param execution_timestamp: ISO 8601 time of the execution.
    :param data_source: Description of where the input came from.
    '''
    block_number: Optional[int] = None
    execution_timestamp: Optional[str] = None
    data_source: Optional[str] = None


@simple_serialization
@dataclasses.dataclass(frozen=True)
class ElectionResult:
    '''Outcome of an election execution.

    :param selected_validators: Elected validators in election order.
    :param stake_distribution: Stake allocations to the elected validators.
    :param total_stake: Total stake participating in the result, i.e.
        the stake of all holders backing at least one elected validator.
    :param algorithm_used: Canonical name of the algorithm used.
    :param execution_metadata: Provenance of the execution.
    '''
    selected_validators: Tuple[SelectedValidator, ...]
    stake_distribution: Tuple[StakeAllocation, ...]
    total_stake: int
    algorithm_used: str
    execution_metadata: ExecutionMetadata = ExecutionMetadata()

    nested_types = {
        'selected_validators': SelectedValidator,
        'stake_distribution': StakeAllocation,
        'execution_metadata': ExecutionMetadata,
    }

    def __post_init__(self):
        object.__setattr__(
            self, 'selected_validators', tuple(self.selected_validators)
        )
        object.__setattr__(
            self, 'stake_distribution', tuple(self.stake_distribution)
        )

    def validator_ids(self) -> List[str]:
        return [val.account_id for val in self.selected_validators]

    def get_validator(self, account_id: str) -> Optional[SelectedValidator]:
        for validator in self.selected_validators:
            if validator.account_id == account_id:
                return validator
        return None

    def allocations_from(self, nominator_id: str) -> List[StakeAllocation]:
        '''Return allocations of the given stake holder.'''
        return [alloc for alloc in self.stake_distribution
                if alloc.nominator_id == nominator_id]

    def allocations_to(self, validator_id: str) -> List[StakeAllocation]:
        '''Return allocations received by the given validator.'''
        return [alloc for alloc in self.stake_distribution
                if alloc.validator_id == validator_id]

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def assemble(solution: ElectionSolution,
             algorithm: str,
             metadata: Optional[ExecutionMetadata] = None,
             ) -> ElectionResult:
    '''Convert raw evaluator output into an election result.

    :param solution: Winners and stake assignments from an evaluator.
    :param algorithm: Canonical name of the algorithm that produced it.
    :param metadata: Provenance to attach.
    '''
    nominator_counts: Dict[str, int] = collections.Counter()
    allocations = []
    for assignment in solution.assignments:
        for validator_id, amount in assignment.distribution:
            allocations.append(StakeAllocation(
                nominator_id=assignment.voter_id,
                validator_id=validator_id,
                amount=amount,
                proportion=float(Fraction(amount, assignment.stake)),
            ))
        if not assignment.self_vote:
            for validator_id in {val_id for val_id, _ in assignment.distribution}:
                nominator_counts[validator_id] += 1
    selected = [
        SelectedValidator(
            account_id=validator_id,
            total_backing_stake=backing,
            nominator_count=nominator_counts[validator_id],
            rank=rank,
        )
        for rank, (validator_id, backing) in enumerate(solution.winners, 1)
    ]
    return ElectionResult(
        selected_validators=selected,
        stake_distribution=allocations,
        total_stake=sum(assignment.stake for assignment in solution.assignments),
        algorithm_used=algorithm,
        execution_metadata=(
            metadata if metadata is not None else ExecutionMetadata()
        ),
    )


def validate_result(result: ElectionResult, active_set_size: int) -> None:
    '''Check the internal consistency of a result.

    :param result: The result to check.
    :param active_set_size: Number of validators that had to be elected.
    :raises AlgorithmError: If the number of validators is wrong, a
        validator is repeated, or the allocated stake does not add up to the
        total stake or to the validators' backing.
    '''
    algorithm = result.algorithm_used
    n_selected = len(result.selected_validators)
    if n_selected != active_set_size:
        raise AlgorithmError(
            f'Result has {n_selected} validators but expected'
            f' {active_set_size}',
            algorithm
        )
    if len(set(result.validator_ids())) != n_selected:
        raise AlgorithmError('Result contains a validator more than once',
                             algorithm)
    total_allocated = sum(alloc.amount for alloc in result.stake_distribution)
    if total_allocated != result.total_stake:
        raise AlgorithmError(
            f"Stake distribution total {total_allocated} doesn't match"
            f' total stake {result.total_stake}',
            algorithm
        )
    allocated_to = collections.Counter()
    for alloc in result.stake_distribution:
        allocated_to[alloc.validator_id] += alloc.amount
    for validator in result.selected_validators:
        if allocated_to[validator.account_id] != validator.total_backing_stake:
            raise AlgorithmError(
                f'Validator {validator.account_id} reports backing'
                f' {validator.total_backing_stake} but is allocated'
                f' {allocated_to[validator.account_id]}',
                algorithm
            )
    unknown = set(allocated_to) - set(result.validator_ids())
    if unknown:
        raise AlgorithmError(
            'Stake allocated to validators not selected: '
            + ', '.join(sorted(unknown)),
            algorithm
        )
