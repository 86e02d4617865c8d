'''Human-readable explanation of election results.

The explanation is a post-hoc report over an already computed result and
the dataset it was computed from; the election is never run again. It
tells for each candidate why it was or was not selected, summarizes the
stake, and adds remarks specific to the algorithm used.
'''

from __future__ import annotations

import collections
import dataclasses
from typing import Any, Dict, List, Optional

import nposelect.config
import nposelect.measure
from nposelect.config import ElectionConfiguration
from nposelect.dataset import ElectionDataset
from nposelect.persist import simple_serialization
from nposelect.result import ElectionResult


ALGORITHM_NOTES = {
    nposelect.config.SEQUENTIAL_PHRAGMEN: (
        'Validators were elected one per round, each time the candidate'
        ' leaving its supporters with the lowest load; stake was then'
        ' balanced among the winners.'
    ),
    nposelect.config.PHRAGMMS: (
        'Validators were elected one per round, each time the candidate'
        ' able to reach the highest backing by taking stake from'
        ' over-backed winners; stake was balanced after every round.'
    ),
    nposelect.config.MULTI_PHASE: (
        'The solution was mined as the multi-phase election provider does:'
        ' sequential Phragmén followed by balancing.'
    ),
}


@simple_serialization
@dataclasses.dataclass
class ValidatorExplanation:
    '''Why a candidate was or was not selected.'''
    account_id: str
    selected: bool
    self_stake: int
    approval_stake: int
    reason: str
    rank: Optional[int] = None
    backing_stake: Optional[int] = None
    nominator_count: Optional[int] = None


@simple_serialization
@dataclasses.dataclass
class StakeAnalysis:
    '''Aggregate stake statistics of the election.'''
    total_stake: int
    participating_stake: int
    idle_stake: int
    min_backing: int
    max_backing: int
    mean_backing: float
    backing_gini: float
    score: Dict[str, int]


@simple_serialization
@dataclasses.dataclass
class Diagnostics:
    '''Explanation of an election result.'''
    validator_explanations: List[ValidatorExplanation]
    stake_analysis: StakeAnalysis
    algorithm_insights: Optional[Dict[str, Any]] = None
    warnings: List[str] = dataclasses.field(default_factory=list)

    nested_types = {
        'validator_explanations': ValidatorExplanation,
        'stake_analysis': StakeAnalysis,
    }


def approval_stakes(dataset: ElectionDataset) -> Dict[str, int]:
    '''Self-stake plus the stake of all approving nominators, per candidate.'''
    stakes = collections.OrderedDict(
        (cand.account_id, cand.stake) for cand in dataset.candidates
    )
    for nominator in dataset.nominators:
        for target in nominator.targets:
            if target in stakes:
                stakes[target] += nominator.stake
    return stakes


def explain(result: ElectionResult,
            dataset: ElectionDataset,
            config: Optional[ElectionConfiguration] = None,
            ) -> Diagnostics:
    '''Explain an election result.

    :param result: The result to explain.
    :param dataset: The dataset the result was computed from (with any
        overrides already applied).
    :param config: The configuration used, for algorithm remarks.
    '''
    approvals = approval_stakes(dataset)
    backing = nposelect.measure.backings(result)
    weakest = min(backing.values()) if backing else 0
    explanations = []
    for cand in dataset.candidates:
        validator = result.get_validator(cand.account_id)
        if validator is not None:
            explanations.append(ValidatorExplanation(
                account_id=cand.account_id,
                selected=True,
                self_stake=cand.stake,
                approval_stake=approvals[cand.account_id],
                reason=(
                    f'elected at rank {validator.rank} with backing'
                    f' {validator.total_backing_stake} from'
                    f' {validator.nominator_count} nominators'
                ),
                rank=validator.rank,
                backing_stake=validator.total_backing_stake,
                nominator_count=validator.nominator_count,
            ))
        else:
            if approvals[cand.account_id] == 0:
                reason = 'not elected: no stake approves this candidate'
            else:
                reason = (
                    f'not elected: approval stake {approvals[cand.account_id]}'
                    ' did not win a seat; the least backed elected validator'
                    f' has backing {weakest}'
                )
            explanations.append(ValidatorExplanation(
                account_id=cand.account_id,
                selected=False,
                self_stake=cand.stake,
                approval_stake=approvals[cand.account_id],
                reason=reason,
            ))
    total_stake = dataset.total_stake()
    score = nposelect.measure.election_score(backing)
    analysis = StakeAnalysis(
        total_stake=total_stake,
        participating_stake=result.total_stake,
        idle_stake=total_stake - result.total_stake,
        min_backing=weakest,
        max_backing=max(backing.values()) if backing else 0,
        mean_backing=(
            score.sum_stake / len(backing) if backing else 0.0
        ),
        backing_gini=float(nposelect.measure.gini(backing)),
        score=score._asdict(),
    )
    insights = {
        'algorithm': result.algorithm_used,
        'description': ALGORITHM_NOTES.get(result.algorithm_used, ''),
    }
    if config is not None:
        insights['balancing_iterations'] = config.balancing_iterations
        insights['balancing_tolerance'] = config.balancing_tolerance
    return Diagnostics(
        validator_explanations=explanations,
        stake_analysis=analysis,
        algorithm_insights=insights,
        warnings=_collect_warnings(result, dataset, approvals),
    )


def _collect_warnings(result: ElectionResult,
                      dataset: ElectionDataset,
                      approvals: Dict[str, int],
                      ) -> List[str]:
    warnings = []
    for validator in result.selected_validators:
        if validator.total_backing_stake == 0:
            warnings.append(
                f'validator {validator.account_id} was elected without any'
                ' backing stake'
            )
    n_unapproved = sum(1 for stake in approvals.values() if stake == 0)
    if n_unapproved:
        warnings.append(f'{n_unapproved} candidates have no approving stake')
    elected = set(result.validator_ids())
    n_idle = sum(
        1 for nom in dataset.nominators
        if nom.targets and not elected.intersection(nom.targets)
    )
    if n_idle:
        warnings.append(
            f'{n_idle} nominators back no elected validator'
            ' and their stake is idle'
        )
    n_empty = sum(1 for nom in dataset.nominators if not nom.targets)
    if n_empty:
        warnings.append(f'{n_empty} nominators have no targets')
    return warnings


def format_text(diagnostics: Diagnostics) -> str:
    '''Render diagnostics as plain text.'''
    analysis = diagnostics.stake_analysis
    lines = [
        'Election Diagnostics',
        '====================',
        f'Total stake: {analysis.total_stake}',
        f'Participating stake: {analysis.participating_stake}',
        f'Idle stake: {analysis.idle_stake}',
        f'Backing min/max/mean: {analysis.min_backing} /'
        f' {analysis.max_backing} / {analysis.mean_backing:.2f}',
        f'Backing Gini coefficient: {analysis.backing_gini:.4f}',
        '',
    ]
    if diagnostics.algorithm_insights:
        description = diagnostics.algorithm_insights.get('description')
        if description:
            lines.extend([description, ''])
    lines.append('Candidates:')
    for expl in diagnostics.validator_explanations:
        lines.append(f'  {expl.account_id}: {expl.reason}')
    if diagnostics.warnings:
        lines.extend(['', 'Warnings:'])
        lines.extend(f'  {warning}' for warning in diagnostics.warnings)
    return '\n'.join(lines)
