import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import nposelect.config
from nposelect.config import ElectionConfiguration
from nposelect.errors import ValidationError, InsufficientCandidates
from nposelect.overrides import ElectionOverrides


@pytest.mark.parametrize('name, canonical', [
    ('sequential-phragmen', 'sequential-phragmen'),
    ('Sequential-Phragmen', 'sequential-phragmen'),
    ('seq-phragmen', 'sequential-phragmen'),
    ('PHRAGMMS', 'phragmms'),
    ('parallel', 'phragmms'),
    ('multi-phase', 'multi-phase'),
    ('multiphase', 'multi-phase'),
])
def test_parse_algorithm(name, canonical):
    assert nposelect.config.parse_algorithm(name) == canonical


def test_unknown_algorithm():
    with pytest.raises(ValidationError) as excinfo:
        ElectionConfiguration('approval-voting', 3)
    assert 'Unknown algorithm type' in str(excinfo.value)
    assert excinfo.value.field == 'algorithm'


@pytest.mark.parametrize('size', [0, -2, 1.5, None])
def test_invalid_active_set_size(size):
    with pytest.raises(ValidationError) as excinfo:
        ElectionConfiguration('phragmms', size)
    assert excinfo.value.field == 'active_set_size'


def test_build_checks_candidates():
    with pytest.raises(InsufficientCandidates) as excinfo:
        ElectionConfiguration.build('phragmms', 10, n_candidates=5)
    assert excinfo.value.requested == 10
    assert excinfo.value.available == 5
    config = ElectionConfiguration.build('PhragMMS', 5, n_candidates=5)
    assert config.algorithm == 'phragmms'


def test_immutable():
    config = ElectionConfiguration.build('sequential-phragmen', 2)
    with pytest.raises(AttributeError):
        config.active_set_size = 3


def test_override_active_set_size():
    config = ElectionConfiguration.build(
        'sequential-phragmen', 2,
        overrides=ElectionOverrides(active_set_size=4),
    )
    assert config.effective_active_set_size == 4
    with pytest.raises(InsufficientCandidates):
        config.check_candidate_count(3)
    with pytest.raises(ValidationError):
        ElectionConfiguration.build(
            'sequential-phragmen', 2,
            overrides=ElectionOverrides(active_set_size=0),
        )


def test_balancing_settings():
    config = ElectionConfiguration.build('phragmms', 1, balancing_iterations=0)
    assert config.balancing_iterations == 0
    with pytest.raises(ValidationError):
        ElectionConfiguration.build('phragmms', 1, balancing_tolerance=-1)


def test_serialization():
    config = ElectionConfiguration.build(
        'multiphase', 3,
        overrides=ElectionOverrides(candidate_stakes={'alice': 10}),
        block_number=100,
    )
    serialized = config.to_dict()
    assert serialized['algorithm'] == 'multi-phase'
    assert serialized['overrides'] == {'candidate_stakes': {'alice': 10}}
    assert ElectionConfiguration.from_dict(serialized) == config
