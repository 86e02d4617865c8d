"""A commandline tool to simulate NPoS validator elections offline.

Loads an election snapshot (or generates a synthetic one), optionally
applies what-if overrides to stakes and nominations, runs the selected
election algorithm and prints the elected validators with their stake
distribution.
"""

import argparse
import io
import json
import logging
import sys
from typing import List, Optional, Tuple

import nposelect.config
import nposelect.diagnostics
import nposelect.generate
import nposelect.io.snapshot
import nposelect.overrides
from nposelect.config import ElectionConfiguration
from nposelect.dataset import ElectionDataset
from nposelect.engine import ElectionEngine
from nposelect.errors import ElectionError, ValidationError
from nposelect.result import ElectionResult

OUTPUT_FORMATS = ['json', 'human-readable']

argparser = argparse.ArgumentParser(
    prog='nposelect',
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-a', '--algorithm',
    default=nposelect.config.SEQUENTIAL_PHRAGMEN,
    help=(
        'election algorithm to use: '
        + ', '.join(nposelect.config.ALGORITHM_SYNONYMS)
    ),
)
argparser.add_argument(
    '-n', '--active-set-size',
    type=int,
    required=True,
    help='number of validators to elect',
)
argparser.add_argument(
    '-i', '--input-file',
    type=argparse.FileType('r', encoding='utf8'),
    help='JSON election snapshot to load',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load the JSON election snapshot from standard input',
)
argparser.add_argument(
    '--synthetic',
    action='store_true',
    help='generate a random election dataset instead of loading one',
)
argparser.add_argument(
    '--n-candidates',
    type=int,
    default=20,
    help='number of candidates in the synthetic dataset',
)
argparser.add_argument(
    '--n-nominators',
    type=int,
    default=100,
    help='number of nominators in the synthetic dataset',
)
argparser.add_argument(
    '--seed',
    type=int,
    help='random seed of the synthetic dataset',
)
argparser.add_argument(
    '-b', '--block-number',
    type=int,
    help='block number to record in the result',
)
argparser.add_argument(
    '--override-candidate-stake',
    action='append',
    default=[],
    metavar='ID=STAKE',
    help='set the self-stake of a candidate (repeatable)',
)
argparser.add_argument(
    '--override-nominator-stake',
    action='append',
    default=[],
    metavar='ID=STAKE',
    help='set the stake of a nominator (repeatable)',
)
argparser.add_argument(
    '--add-edge',
    action='append',
    default=[],
    metavar='NOMINATOR=CANDIDATE',
    help='make a nominator approve a candidate (repeatable)',
)
argparser.add_argument(
    '--remove-edge',
    action='append',
    default=[],
    metavar='NOMINATOR=CANDIDATE',
    help='withdraw an approval of a nominator (repeatable)',
)
argparser.add_argument(
    '-d', '--diagnostics',
    action='store_true',
    help='explain why each candidate was or was not elected',
)
argparser.add_argument(
    '-f', '--format',
    choices=OUTPUT_FORMATS,
    default='json',
    help='output format',
)
argparser.add_argument(
    '-o', '--output-file',
    type=argparse.FileType('w', encoding='utf8'),
    help='file to write the output to instead of standard output',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all algorithm log messages',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any log messages except errors',
)


def main(active_set_size: int,
         algorithm: str = nposelect.config.SEQUENTIAL_PHRAGMEN,
         input_file: Optional[io.TextIOBase] = None,
         use_stdin: bool = False,
         synthetic: bool = False,
         n_candidates: int = 20,
         n_nominators: int = 100,
         seed: Optional[int] = None,
         block_number: Optional[int] = None,
         override_candidate_stake: List[str] = (),
         override_nominator_stake: List[str] = (),
         add_edge: List[str] = (),
         remove_edge: List[str] = (),
         diagnostics: bool = False,
         format: str = 'json',
         output_file: Optional[io.TextIOBase] = None,
         verbose: bool = False,
         quiet: bool = False,
         ) -> int:
    """Run the election and write its output. Return the exit status."""
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.ERROR if quiet else logging.WARNING)
        ),
        format='%(levelname)-10s %(message)s'
    )
    out = output_file if output_file is not None else sys.stdout
    try:
        dataset, data_source = load_dataset(
            input_file, use_stdin, synthetic, n_candidates, n_nominators, seed
        )
        overrides = nposelect.overrides.from_directives(
            candidate_stakes=override_candidate_stake,
            nominator_stakes=override_nominator_stake,
            added_edges=add_edge,
            removed_edges=remove_edge,
        )
        config = ElectionConfiguration.build(
            algorithm=nposelect.config.parse_algorithm(algorithm),
            active_set_size=active_set_size,
            overrides=None if overrides.is_empty() else overrides,
            block_number=block_number,
        )
        engine = ElectionEngine()
        if diagnostics:
            result, explanation = engine.execute_with_diagnostics(
                config, dataset, data_source
            )
        else:
            result = engine.execute(config, dataset, data_source)
            explanation = None
    except ElectionError as err:
        write_error(err, out)
        return 1
    if format == 'json':
        output = {'result': result.to_dict()}
        if explanation is not None:
            output['diagnostics'] = explanation.to_dict()
        out.write(json.dumps(output, indent=2))
        out.write('\n')
    else:
        show_result(result, out)
        if explanation is not None:
            out.write('\n')
            out.write(nposelect.diagnostics.format_text(explanation))
            out.write('\n')
    return 0


def load_dataset(input_file: Optional[io.TextIOBase],
                 use_stdin: bool = False,
                 synthetic: bool = False,
                 n_candidates: int = 20,
                 n_nominators: int = 100,
                 seed: Optional[int] = None,
                 ) -> Tuple[ElectionDataset, str]:
    """Obtain the election dataset from the selected source.

    Return the dataset and a description of its source.
    """
    if synthetic:
        dataset = nposelect.generate.random_dataset(
            n_candidates, n_nominators, seed=seed
        )
        return dataset, f'synthetic (seed {seed})'
    if use_stdin:
        return nposelect.io.snapshot.load(sys.stdin), 'stdin'
    if input_file is None:
        raise ValidationError(
            'no data source selected', 'input_file'
        )
    return (
        nposelect.io.snapshot.load(input_file),
        getattr(input_file, 'name', 'file')
    )


def write_error(err: ElectionError, out: io.TextIOBase) -> None:
    """Write a structured description of an election failure."""
    error = {'type': type(err).__name__, 'message': str(err)}
    for attr in ('field', 'requested', 'available', 'algorithm'):
        value = getattr(err, attr, None)
        if value is not None:
            error[attr] = value
    out.write(json.dumps({'error': error}, indent=2))
    out.write('\n')


def show_result(result: ElectionResult, out: io.TextIOBase) -> None:
    """Show the election result in a human-readable table."""
    out.write(
        f'Elected {len(result.selected_validators)} validators'
        f' using {result.algorithm_used}\n'
    )
    out.write(f'Total stake: {result.total_stake}\n\n')
    if not result.selected_validators:
        out.write('Nobody elected\n')
        return
    n_id_chars = max(len(val.account_id) for val in result.selected_validators)
    n_rank_chars = len(str(len(result.selected_validators)))
    for val in result.selected_validators:
        out.write(
            f'{str(val.rank).rjust(n_rank_chars)}  '
            f'{val.account_id.ljust(n_id_chars)}  '
            f'{val.total_backing_stake:>20}  '
            f'({val.nominator_count} nominators)\n'
        )


def run(argv: Optional[List[str]] = None) -> None:
    args = argparser.parse_args(argv)
    if not (args.input_file or args.use_stdin or args.synthetic):
        argparser.print_usage()
        sys.exit(2)
    sys.exit(main(**vars(args)))


if __name__ == '__main__':
    run()
