"""JSON snapshots of election datasets, configurations and results.

A dataset snapshot is a JSON object with the ``candidates`` and
``nominators`` lists and optional ``metadata``::

    {
        "candidates": [{"account_id": "alice", "stake": 1000}],
        "nominators": [
            {"account_id": "carol", "stake": 700, "targets": ["alice"]}
        ],
        "metadata": {"block_number": 20000000, "chain": "polkadot"}
    }

Optional fields are omitted when absent. Stakes may also be given as
decimal strings. Loaded datasets are validated.
"""

from typing import Any

import nposelect.io.core
from nposelect.config import ElectionConfiguration
from nposelect.dataset import ElectionDataset
from nposelect.errors import InvalidData
from nposelect.result import ElectionResult


def parse_dataset(value: Any, validate: bool = True) -> ElectionDataset:
    """Build a dataset from a parsed JSON value.

    :param value: Parsed JSON snapshot.
    :param validate: Whether to check the dataset invariants.
    :raises InvalidData: If the structure is not a dataset snapshot.
    :raises ValidationError: If the dataset violates its invariants.
    """
    if not isinstance(value, dict):
        raise InvalidData(f'dataset snapshot must be an object, got {value!r}')
    for key in ('candidates', 'nominators'):
        if key in value and not isinstance(value[key], list):
            raise InvalidData(f'dataset snapshot field {key} must be a list')
    dataset = ElectionDataset.from_dict(value)
    if validate:
        dataset.validate()
    return dataset


def parse_config(value: Any) -> ElectionConfiguration:
    """Build an election configuration from a parsed JSON value."""
    return ElectionConfiguration.from_dict(value)


def parse_result(value: Any) -> ElectionResult:
    """Build an election result from a parsed JSON value."""
    return ElectionResult.from_dict(value)


def serialize(obj: Any) -> Any:
    """Return the JSON-ready form of a dataset, configuration or result."""
    return obj.to_dict()


load, loads = nposelect.io.core.loaders(parse_dataset)
load_config, loads_config = nposelect.io.core.loaders(parse_config)
load_result, loads_result = nposelect.io.core.loaders(parse_result)
dump, dumps = nposelect.io.core.dumpers(serialize)
