"""
Fixture comuni: orologio manuale e simulatore deterministico
"""

import numpy as np
import pytest

from core import ControllerSimulator, PhysicsConfig


class FakeClock:
    """Orologio manuale in secondi"""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def simulator(clock):
    """Simulatore senza rumore con orologio manuale"""
    return ControllerSimulator(
        clock=clock,
        rng=np.random.default_rng(0),
        physics=PhysicsConfig(noise_amplitude=0.0)
    )
