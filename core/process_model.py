"""
Modello Fisico - Simulazione termica del processo

Il PV evolve per bilancio di calore:
- Riscaldatore comandato dall'uscita MV (0-100%)
- Calore esterno (ingresso audio, fornito da fuori)
- Dispersione verso l'ambiente proporzionale a (PV - ambiente)
- Piccolo rumore simmetrico del sensore
"""

from dataclasses import dataclass

import numpy as np

from config import (
    PV_MIN, PV_MAX,
    INITIAL_PV, INITIAL_SV,
    AMBIENT_TEMP, THERMAL_INERTIA, COOLING_RATE,
    HEATER_GAIN, NOISE_AMPLITUDE
)


def clamp(value, low, high):
    """Limita value all'intervallo [low, high]"""
    return max(low, min(high, value))


@dataclass
class ProcessState:
    """Stato del processo, modificato una volta per tick fisico/controllo"""
    pv: float = INITIAL_PV
    sv: float = INITIAL_SV
    mv: float = 0.0
    last_pv: float = INITIAL_PV

    def set_sv(self, value):
        self.sv = clamp(value, PV_MIN, PV_MAX)


@dataclass
class PhysicsConfig:
    """Parametri ambiente, regolabili dall'esterno"""
    ambient_temp: float = AMBIENT_TEMP
    thermal_inertia: float = THERMAL_INERTIA
    cooling_rate: float = COOLING_RATE
    heater_gain: float = HEATER_GAIN
    external_heat_input: float = 0.0
    sensor_connected: bool = True
    noise_amplitude: float = NOISE_AMPLITUDE


class ProcessModel:
    """
    Modello termico a un nodo.

    Il generatore casuale è iniettabile: con un seed fisso (o
    noise_amplitude = 0) la simulazione è deterministica.
    """

    def __init__(self, state=None, physics=None, rng=None):
        """
        Args:
            state (ProcessState): Stato condiviso con il controller
            physics (PhysicsConfig): Parametri ambiente
            rng (numpy.random.Generator): Sorgente rumore sensore
        """
        self.state = state if state is not None else ProcessState()
        self.physics = physics if physics is not None else PhysicsConfig()
        self.rng = rng if rng is not None else np.random.default_rng()

    def heat_gain(self):
        """Calore entrante (°C/s): esterno + riscaldatore"""
        return (self.physics.external_heat_input
                + (self.state.mv / 100.0) * self.physics.heater_gain)

    def natural_loss(self):
        """Dispersione verso l'ambiente (°C/s)"""
        return (self.state.pv - self.physics.ambient_temp) * self.physics.cooling_rate

    def advance(self, dt):
        """
        Avanza la simulazione di dt secondi.

        Con sensore scollegato il PV resta congelato (il display
        segnala il guasto). Non fallisce mai: al massimo satura.

        Args:
            dt (float): Passo temporale in secondi

        Returns:
            float: Nuovo PV
        """
        if not self.physics.sensor_connected or dt <= 0:
            return self.state.pv

        pv = self.state.pv + (self.heat_gain() - self.natural_loss()) * dt

        # Rumore fine del sensore
        amplitude = self.physics.noise_amplitude
        if amplitude > 0:
            pv += self.rng.uniform(-amplitude, amplitude)

        self.state.pv = clamp(pv, PV_MIN, PV_MAX)
        return self.state.pv

    def is_over_range(self):
        return self.state.pv >= PV_MAX

    def is_under_range(self):
        return self.state.pv <= PV_MIN

    def get_status(self):
        """Stato modello per diagnostica"""
        return {
            'pv': round(self.state.pv, 2),
            'ambient_temp': self.physics.ambient_temp,
            'thermal_inertia': self.physics.thermal_inertia,
            'cooling_rate': self.physics.cooling_rate,
            'heater_gain': self.physics.heater_gain,
            'external_heat_input': round(self.physics.external_heat_input, 3),
            'sensor_connected': self.physics.sensor_connected,
            'over_range': self.is_over_range(),
            'under_range': self.is_under_range()
        }
