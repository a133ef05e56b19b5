"""
Test Controller: PID, ON/OFF, fail-safe e autotuning AT-2
"""

import math

import pytest

from config import AUTOTUNE_FALLBACK_P, AUTOTUNE_FALLBACK_I, AUTOTUNE_FALLBACK_D
from core import (
    ProcessState, PIDController, RelayAutotuner, Controller, ParameterStore
)


def make_controller(clock, **values):
    autotuner = RelayAutotuner()
    params = ParameterStore(autotuner=autotuner, clock=clock, values=values)
    state = ProcessState()
    return Controller(state, params, autotuner=autotuner), state, params


# ===== PID =====

def test_pid_integral_stays_within_limits():
    pid = PIDController()
    state = ProcessState(pv=0.0, sv=1000.0, last_pv=0.0)
    for _ in range(50):
        pid.compute(state, p=8.0, i=1, d=0)
        assert -100.0 <= pid.integral <= 100.0
    assert pid.integral == 100.0

    state = ProcessState(pv=1000.0, sv=0.0, last_pv=1000.0)
    for _ in range(50):
        pid.compute(state, p=8.0, i=1, d=0)
        assert -100.0 <= pid.integral <= 100.0
    assert pid.integral == -100.0


@pytest.mark.parametrize('last_pv', [99.0, 101.0])
def test_pid_setpoint_crossing_halves_integral(last_pv):
    pid = PIDController()
    pid.integral = 40.0
    # PV esattamente sul setpoint: nessun accumulo (banda morta)
    state = ProcessState(pv=100.0, sv=100.0, last_pv=last_pv)
    pid.compute(state, p=8.0, i=240, d=0)
    assert pid.integral == pytest.approx(20.0)


def test_pid_crossing_accumulates_before_halving():
    pid = PIDController()
    pid.integral = 40.0
    state = ProcessState(pv=100.5, sv=100.0, last_pv=99.0)
    pid.compute(state, p=8.0, i=240, d=0)
    assert pid.integral == pytest.approx((40.0 - 0.5 / 240) * 0.5)

    # Integrale già al limite: prima clamp, poi dimezzamento
    pid.integral = 100.0
    state = ProcessState(pv=99.5, sv=100.0, last_pv=101.0)
    pid.compute(state, p=8.0, i=1, d=0)
    assert pid.integral == pytest.approx(50.0)


def test_pid_no_halving_without_crossing():
    pid = PIDController()
    pid.integral = 40.0
    state = ProcessState(pv=95.0, sv=100.0, last_pv=94.0)
    pid.compute(state, p=8.0, i=240, d=0)
    assert pid.integral == pytest.approx(40.0 + 5.0 / 240)


def test_pid_integral_deadband():
    pid = PIDController()
    state = ProcessState(pv=99.95, sv=100.0, last_pv=99.95)
    pid.compute(state, p=8.0, i=1, d=0)
    assert pid.integral == 0.0


def test_pid_proportional_band():
    pid = PIDController()
    state = ProcessState(pv=95.0, sv=100.0, last_pv=95.0)
    mv = pid.compute(state, p=10.0, i=240, d=0)
    assert mv == pytest.approx(10.0 * 5.0 + 5.0 / 240)
    assert state.mv == mv
    assert state.last_pv == 95.0

    # Banda più larga: risposta più morbida
    gentle = PIDController().compute(ProcessState(pv=95.0, sv=100.0, last_pv=95.0),
                                     p=50.0, i=240, d=0)
    assert gentle < mv


def test_pid_derivative_on_measurement():
    pid = PIDController()
    # Salto di setpoint con PV fermo: nessun contributo derivativo
    state = ProcessState(pv=50.0, sv=150.0, last_pv=50.0)
    pid.compute(state, p=8.0, i=240, d=40)
    assert pid.last_d_term == 0.0

    # PV che sale: derivata negativa
    state = ProcessState(pv=51.0, sv=150.0, last_pv=50.0)
    pid.compute(state, p=10.0, i=240, d=2)
    assert pid.last_d_term == pytest.approx(10.0 * 2 * (50.0 - 51.0) / 0.5)


def test_pid_output_clamped():
    pid = PIDController()
    assert pid.compute(ProcessState(pv=0.0, sv=1000.0, last_pv=0.0), 0.1, 1, 0) == 100.0
    assert pid.compute(ProcessState(pv=1000.0, sv=0.0, last_pv=1000.0), 0.1, 1, 0) == 0.0


# ===== ON/OFF =====

def test_on_off_with_hysteresis(clock):
    controller, state, params = make_controller(clock, cntl='onof', hys=1.0)
    state.sv = 100.0

    state.pv = 98.5
    assert controller.tick(clock()) == 100.0
    assert controller.get_mode() == 'onof'

    # Banda morta: uscita invariata
    state.pv = 99.5
    assert controller.tick(clock()) == 100.0

    state.pv = 100.5
    assert controller.tick(clock()) == 0.0

    state.pv = 99.5
    assert controller.tick(clock()) == 0.0


# ===== FAIL-SAFE =====

def test_sensor_fault_forces_zero_output(clock):
    controller, state, params = make_controller(clock)
    state.pv = 20.0
    controller.tick(clock())
    assert state.mv > 0
    assert controller.pid.integral != 0

    controller.tick(clock(), sensor_connected=False)
    assert state.mv == 0.0
    assert controller.pid.integral == 0.0
    assert controller.get_mode() == 'stopped'


def test_stop_control_overrides_autotune(clock):
    controller, state, params = make_controller(clock)
    params.adjust_param('at', 1, 'adjustment')
    state.pv = 20.0

    controller.tick(clock(), stop_control=True)
    assert state.mv == 0.0
    assert controller.get_mode() == 'stopped'

    controller.tick(clock())
    assert controller.get_mode() == 'autotuning'
    assert state.mv == 100.0


# ===== AUTOTUNING =====

def test_autotune_terminates_with_pid_constants(clock):
    controller, state, params = make_controller(clock, cntl='onof')
    params.adjust_param('at', 1, 'adjustment')
    assert params.get('at') == 'at-2'

    state.pv = 20.0
    for _ in range(39):
        clock.advance(0.5)
        controller.tick(clock())
        assert controller.get_mode() == 'autotuning'
        assert params.get('at') == 'at-2'

    clock.advance(0.5)  # 20 s
    controller.tick(clock())

    assert not controller.autotuner.is_running
    assert params.get('at') == 'off'
    assert params.get('cntl') == 'pid'
    assert controller.get_mode() == 'pid'
    assert params.get('p') > 0 and params.get('i') > 0 and params.get('d') > 0
    # Nessuna oscillazione in 20 s: costanti di riserva
    assert controller.autotuner.method == 'fallback'
    assert (params.get('p'), params.get('i'), params.get('d')) == (
        AUTOTUNE_FALLBACK_P, AUTOTUNE_FALLBACK_I, AUTOTUNE_FALLBACK_D)

    # Ciclo successivo: PID normale
    clock.advance(0.5)
    controller.tick(clock())
    assert controller.get_mode() == 'pid'


def test_autotune_relay_output():
    tuner = RelayAutotuner()
    tuner.start(0.0)
    assert tuner.compute_output(90.0, 100.0, 0.5) == 100.0
    assert tuner.compute_output(100.0, 100.0, 1.0) == 0.0
    assert tuner.compute_output(110.0, 100.0, 1.5) == 0.0
    assert tuner.is_running


def test_autotune_ziegler_nichols_estimate():
    tuner = RelayAutotuner()
    tuner.start(0.0)

    # Oscillazione sostenuta: periodo 5 s, ampiezza 5 °C
    t = 0.0
    while tuner.is_running:
        pv = 100.0 + 5.0 * math.sin(2 * math.pi * t / 5.0 + 0.3)
        tuner.compute_output(pv, 100.0, t)
        t += 0.5

    results = tuner.get_results()
    assert tuner.method == 'ziegler_nichols'
    assert tuner.Pu == pytest.approx(5.0, abs=0.01)
    assert tuner.amplitude == pytest.approx(5.0, abs=0.05)
    assert results['p'] == pytest.approx(100.0 / (0.6 * 400.0 / (math.pi * 5.0)), abs=0.2)
    assert results['i'] >= 1
    assert results['d'] >= 1


def test_autotune_cancel(clock):
    controller, state, params = make_controller(clock)
    params.adjust_param('at', 1, 'adjustment')
    params.adjust_param('at', -1, 'adjustment')
    assert params.get('at') == 'off'
    assert not controller.autotuner.is_running
    assert controller.autotuner.get_results() is None
