"""
Test Parameter Store
"""

import pytest

from core import ParameterStore, RelayAutotuner


def test_p_never_below_floor():
    params = ParameterStore()
    for _ in range(200):
        params.adjust_param('p', -1, 'adjustment')
        assert params.get('p') >= 0.1
    assert params.get('p') == 0.1


@pytest.mark.parametrize('name', ['p', 'i', 'd', 'hys'])
def test_stepped_params_floor(name):
    params = ParameterStore()
    for _ in range(300):
        params.adjust_param(name, -1, 'adjustment')
    assert params.get(name) == 0.1


def test_steps():
    params = ParameterStore()
    params.adjust_param('p', 1, 'adjustment')
    assert params.get('p') == 8.1
    params.adjust_param('hys', -1, 'adjustment')
    assert params.get('hys') == 0.9
    params.adjust_param('i', 1, 'adjustment')
    assert params.get('i') == 241
    params.adjust_param('d', -1, 'adjustment')
    assert params.get('d') == 39


def test_choice_params():
    params = ParameterStore()
    params.adjust_param('cntl', -1, 'initial')
    assert params.get('cntl') == 'onof'
    params.adjust_param('cntl', 1, 'initial')
    assert params.get('cntl') == 'pid'

    params.adjust_param('in-t', 1, 'initial')
    assert params.get('in-t') == 6
    params.adjust_param('in-t', -1, 'initial')
    assert params.get('in-t') == 5


@pytest.mark.parametrize('name', ['oapt', 'alt1'])
def test_ranged_params_clamped(name):
    params = ParameterStore()
    for _ in range(10):
        params.adjust_param(name, 1, 'protection')
    assert params.get(name) == 3
    for _ in range(10):
        params.adjust_param(name, -1, 'protection')
    assert params.get(name) == 0


def test_protection_lock():
    params = ParameterStore(values={'oapt': 3})
    assert params.is_locked('adjustment')
    assert params.is_locked('operation')
    assert not params.is_locked('protection')

    assert params.adjust_param('p', 1, 'adjustment') is False
    assert params.get('p') == 8.0
    assert params.adjust_param('cntl', -1, 'initial') is False
    assert params.get('cntl') == 'pid'

    # oAPt resta modificabile dal livello protezione
    assert params.adjust_param('oapt', -1, 'protection') is True
    assert params.get('oapt') == 2
    assert params.adjust_param('p', 1, 'adjustment') is True
    assert params.get('p') == 8.1


def test_at_starts_and_cancels_session():
    now = [12.0]
    tuner = RelayAutotuner()
    params = ParameterStore(autotuner=tuner, clock=lambda: now[0])

    params.adjust_param('at', 1, 'adjustment')
    assert params.get('at') == 'at-2'
    assert tuner.is_running
    assert tuner.start_time == 12.0

    params.adjust_param('at', -1, 'adjustment')
    assert params.get('at') == 'off'
    assert not tuner.is_running


def test_set_param_validation():
    params = ParameterStore()
    assert params.set_param('unknown', 1) is False
    assert params.set_param('cntl', 'fuzzy') is False
    assert params.get('cntl') == 'pid'
    assert params.set_param('in-t', 7) is False

    assert params.set_param('p', -5.0) is True
    assert params.get('p') == 0.1
    assert params.set_param('d', 0) is True
    assert params.get('d') == 0
    assert params.set_param('i', 12.4) is True
    assert params.get('i') == 12
    assert params.set_param('oapt', 9) is True
    assert params.get('oapt') == 3


def test_set_param_rejects_non_numeric():
    params = ParameterStore()
    assert params.set_param('p', 'abc') is False
    assert params.set_param('i', None) is False
    assert params.set_param('oapt', 'x') is False
    assert params.set_param('hys', float('nan')) is False
    assert params.get('p') == 8.0
    assert params.get('oapt') == 0

    assert params.set_param('p', '12.5') is True
    assert params.get('p') == 12.5


def test_set_param_at_drives_session():
    now = [5.0]
    tuner = RelayAutotuner()
    params = ParameterStore(autotuner=tuner, clock=lambda: now[0])

    assert params.set_param('at', 'at-2') is True
    assert params.get('at') == 'at-2'
    assert tuner.is_running
    assert tuner.start_time == 5.0

    assert params.set_param('at', 'off') is True
    assert params.get('at') == 'off'
    assert not tuner.is_running


def test_install_tuning_forces_pid():
    params = ParameterStore(values={'cntl': 'onof', 'at': 'at-2'})
    params.install_tuning(5.5, 180, 45)
    values = params.get_all()
    assert values['at'] == 'off'
    assert values['cntl'] == 'pid'
    assert (values['p'], values['i'], values['d']) == (5.5, 180, 45)


def test_get_all_is_a_copy():
    params = ParameterStore()
    values = params.get_all()
    values['p'] = 99
    assert params.get('p') == 8.0
