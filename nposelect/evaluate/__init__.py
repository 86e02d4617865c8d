'''Election algorithms.

Every algorithm is an :class:`core.Evaluator` that elects a given number of
validators from an :class:`nposelect.dataset.ElectionDataset` and returns an
:class:`core.ElectionSolution` - the winners in the order they were elected
with their backing, and the integer stake assignment of every voter.

The set of algorithms is closed; they are kept in the ``EVALUATORS``
register keyed by their canonical names (see :mod:`nposelect.config`).
`get()` retrieves an evaluator class by name, `construct()` instantiates it
with the balancing settings.
'''

from typing import Dict

import nposelect.component.core
from nposelect.evaluate.core import Evaluator, ElectionSolution, Assignment
from nposelect.evaluate.phragmen import SequentialPhragmen, MultiPhase
from nposelect.evaluate.phragmms import PhragMMS


EVALUATORS: Dict[str, type] = {}

evaluator_mark, get, construct = nposelect.component.core.register_functions(
    EVALUATORS, 'algorithm'
)

for evaluator_class in (SequentialPhragmen, PhragMMS, MultiPhase):
    evaluator_mark(evaluator_class)
