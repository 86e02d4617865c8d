'''The election engine - runs an election from dataset and configuration.

The engine composes the pieces: it validates the input, applies the
overrides to a copy of the dataset, dispatches to the configured algorithm
and checks the result before returning it. Executions share no state, so
one engine can serve concurrent executions.
'''

import datetime
import logging
from typing import Optional, Tuple

import nposelect.diagnostics
import nposelect.evaluate
import nposelect.overrides
import nposelect.result
from nposelect.config import ElectionConfiguration
from nposelect.dataset import ElectionDataset
from nposelect.result import ElectionResult, ExecutionMetadata


logger = logging.getLogger(__name__)


class ElectionEngine:
    '''Execute elections with the configured algorithm.'''

    def execute(self,
                config: ElectionConfiguration,
                dataset: ElectionDataset,
                data_source: Optional[str] = None,
                timestamp: Optional[str] = None,
                ) -> ElectionResult:
        '''Run an election.

        :param config: Validated election configuration.
        :param dataset: Input dataset; never modified.
        :param data_source: Description of the input origin to record in the
            result metadata.
        :param timestamp: Execution time to record; the current UTC time
            if not given.
        :raises ValidationError: If the dataset is invalid, before or after
            applying the overrides.
        :raises InsufficientCandidates: If the active set cannot be filled.
        :raises AlgorithmError: If the algorithm fails or its result is
            inconsistent.
        '''
        dataset.validate()
        config.check_candidate_count(len(dataset.candidates))
        working = nposelect.overrides.apply_overrides(config.overrides, dataset)
        if config.overrides is not None and not config.overrides.is_empty():
            logger.info('overrides applied, revalidating the dataset')
            working.validate()
        n_seats = config.effective_active_set_size
        evaluator = nposelect.evaluate.construct(
            config.algorithm,
            balancing_iterations=config.balancing_iterations,
            balancing_tolerance=config.balancing_tolerance,
        )
        logger.info('running %s for %d seats', config.algorithm, n_seats)
        solution = evaluator.evaluate(working, n_seats)
        block_number = config.block_number
        if block_number is None and dataset.metadata is not None:
            block_number = dataset.metadata.block_number
        result = nposelect.result.assemble(
            solution,
            config.algorithm,
            ExecutionMetadata(
                block_number=block_number,
                execution_timestamp=(
                    timestamp if timestamp is not None else _utc_now()
                ),
                data_source=data_source,
            )
        )
        nposelect.result.validate_result(result, n_seats)
        logger.info('elected %s', ', '.join(result.validator_ids()))
        return result

    def execute_with_diagnostics(self,
                                 config: ElectionConfiguration,
                                 dataset: ElectionDataset,
                                 data_source: Optional[str] = None,
                                 timestamp: Optional[str] = None,
                                 ) -> Tuple[
                                     ElectionResult,
                                     nposelect.diagnostics.Diagnostics
                                 ]:
        '''Run an election and explain its result.

        The explanation is computed over the dataset the election actually
        ran on, i.e. with the overrides applied.
        '''
        result = self.execute(config, dataset, data_source, timestamp)
        working = nposelect.overrides.apply_overrides(config.overrides, dataset)
        return result, nposelect.diagnostics.explain(result, working, config)


def _utc_now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()
