"""
Simulatore Termoregolatore - Oggetto principale

Possiede tutto lo stato (niente singleton globale): più simulatori
indipendenti possono convivere. Orologio e generatore casuale sono
iniettabili per test deterministici.

Tre compiti periodici condividono lo stato:
- tick_physics()  ogni PHYSICS_INTERVAL  (modello fisico)
- tick_control()  ogni CONTROL_INTERVAL  (PID / ON-OFF / AT)
- poll()          il più spesso possibile (pressioni lunghe)
"""

import time

import numpy as np

from config import PV_MIN, PV_MAX, SV_STEP, EXTERNAL_HEAT_GAIN
from utils import format_four_digits, format_param_value, param_label
from .process_model import ProcessState, PhysicsConfig, ProcessModel
from .autotuner import RelayAutotuner
from .parameters import ParameterStore
from .controller import Controller
from .menu import LevelMenu
from .input_dispatcher import InputDispatcher
from .safety_monitor import SafetyMonitor
from .data_logger import DataLogger


class ControllerSimulator:
    """
    Termoregolatore simulato: processo, controllo e pannello frontale
    """

    def __init__(self, clock=time.time, rng=None, physics=None, params=None):
        """
        Args:
            clock (callable): Orologio in secondi
            rng (numpy.random.Generator): Rumore sensore
            physics (PhysicsConfig): Parametri ambiente
            params (dict): Override parametri di regolazione
        """
        self.clock = clock
        self.state = ProcessState()
        self.physics = physics if physics is not None else PhysicsConfig()
        self.model = ProcessModel(
            self.state, self.physics,
            rng if rng is not None else np.random.default_rng()
        )

        self.autotuner = RelayAutotuner()
        self.params = ParameterStore(autotuner=self.autotuner, clock=clock, values=params)
        self.controller = Controller(self.state, self.params, autotuner=self.autotuner)

        self.logger = DataLogger()
        self.menu = LevelMenu(on_level_change=self._on_level_change)
        self.input = InputDispatcher(self.menu, self.adjust_value)
        self.safety = SafetyMonitor()

        now = clock()
        self._last_physics_time = now
        self._physics_ticks_since_control = 0
        self._autotune_was_running = False

    # ===== TICK PERIODICI =====

    def tick_physics(self, now=None):
        """Avanza il modello fisico del tempo trascorso dall'ultimo tick"""
        now = self.clock() if now is None else now
        dt = now - self._last_physics_time
        self._last_physics_time = now
        self.model.advance(dt)
        self._physics_ticks_since_control += 1
        return self.state.pv

    def tick_control(self, now=None):
        """
        Un ciclo di controllo.
        Se nessun tick fisico è avvenuto dall'ultimo ciclo, il
        modello viene avanzato prima: il controllo non legge mai
        un PV vecchio.
        """
        now = self.clock() if now is None else now
        if self._physics_ticks_since_control == 0:
            self.tick_physics(now)
        self._physics_ticks_since_control = 0

        mv = self.controller.tick(
            now,
            sensor_connected=self.physics.sensor_connected,
            stop_control=self.menu.stop_control
        )

        # Fine sessione AT
        if self._autotune_was_running and not self.autotuner.is_running:
            if self.autotuner.phase == 'complete':
                results = self.autotuner.get_results()
                self.logger.log_event(
                    'autotune_complete',
                    f"AT-2 {self.autotuner.method}: P={results['p']} I={results['i']} d={results['d']}",
                    now
                )
        self._autotune_was_running = self.autotuner.is_running

        self.logger.log_sample(now, self.state.pv, self.state.sv, mv)
        return mv

    def poll(self, now=None):
        """Rilevamento pressioni lunghe (ciclo di render)"""
        now = self.clock() if now is None else now
        return self.input.check_long_presses(now)

    # ===== COMANDI PANNELLO =====

    def on_button_down(self, button_id, timestamp=None):
        timestamp = self.clock() if timestamp is None else timestamp
        return self.input.on_button_down(button_id, timestamp)

    def on_button_up(self, button_id, timestamp=None):
        timestamp = self.clock() if timestamp is None else timestamp
        return self.input.on_button_up(button_id, timestamp)

    def adjust_value(self, direction):
        """
        UP/DOWN sul parametro selezionato (o sul setpoint in operation)

        Returns:
            bool: True se qualcosa è cambiato
        """
        level = self.menu.current_level
        name = self.menu.selected_item

        if name == 'pv_sv':
            if self.params.is_locked(level):
                return False
            self.state.set_sv(self.state.sv + direction * SV_STEP)
            return True

        was_running = self.autotuner.is_running
        changed = self.params.adjust_param(name, direction, level)
        if name == 'at' and changed:
            if self.autotuner.is_running:
                self.logger.log_event('autotune_start', 'AT-2 avviato', self.clock())
            elif was_running:
                self.logger.log_event('autotune_stop', 'AT-2 annullato', self.clock())
            self._autotune_was_running = self.autotuner.is_running
        return changed

    # ===== AMBIENTE =====

    def set_ambient_temp(self, value):
        self.physics.ambient_temp = float(value)

    def set_cooling_rate(self, value):
        self.physics.cooling_rate = max(0.0, float(value))

    def set_sensor_connected(self, connected):
        connected = bool(connected)
        if connected == self.physics.sensor_connected:
            return
        self.physics.sensor_connected = connected
        if connected:
            self.logger.log_event('sensor_restored', 'Sensore ricollegato', self.clock())
        else:
            self.logger.log_event('sensor_fault', 'Errore sensore: uscita forzata a 0%', self.clock())

    def set_external_heat_input(self, value):
        """Calore esterno in °C/s (dal collaboratore audio)"""
        self.physics.external_heat_input = max(0.0, float(value))

    def set_external_volume(self, volume, gain=1.0):
        """Volume audio 0-1 convertito in calore esterno"""
        volume = max(0.0, min(1.0, float(volume)))
        self.set_external_heat_input(volume * EXTERNAL_HEAT_GAIN * gain)

    # ===== LETTURA STATO =====

    @property
    def pv(self):
        return self.state.pv

    @property
    def sv(self):
        return self.state.sv

    @property
    def mv(self):
        return self.state.mv

    @property
    def level(self):
        return self.menu.current_level

    @property
    def selected_item(self):
        return self.menu.selected_item

    @property
    def selected_value(self):
        """Valore formattato del parametro selezionato"""
        name = self.menu.selected_item
        if name == 'pv_sv':
            return format_four_digits(self.state.sv)
        return format_param_value(name, self.params.get(name))

    @property
    def stop_control(self):
        return self.menu.stop_control

    @property
    def autotune_active(self):
        return self.autotuner.is_running

    @property
    def is_locked(self):
        return self.params.is_locked(self.menu.current_level)

    def check_safety(self):
        return self.safety.check_all(
            self.state.pv, self.state.sv,
            sensor_connected=self.physics.sensor_connected,
            alarm_type=self.params.get('alt1')
        )

    def get_display(self):
        """
        Testo dei due display (PV in alto, SV in basso)

        Returns:
            dict: {pv, sv, blink}
        """
        if not self.physics.sensor_connected:
            return {'pv': 'S.Err', 'sv': '----', 'blink': True}
        if self.state.pv >= PV_MAX or self.state.pv <= PV_MIN:
            return {'pv': 'oooo', 'sv': format_four_digits(self.state.sv), 'blink': True}

        name = self.menu.selected_item
        if name == 'pv_sv':
            return {
                'pv': format_four_digits(self.state.pv),
                'sv': format_four_digits(self.state.sv),
                'blink': False
            }
        return {'pv': param_label(name), 'sv': self.selected_value, 'blink': False}

    def get_indicators(self):
        """Stato LED del pannello"""
        safety = self.check_safety()
        return {
            'out1': self.state.mv > 0,
            'tune': self.autotuner.is_running,
            'stop': self.menu.stop_control,
            'lock': self.params.get('oapt') != 0,
            'sub1': safety['alarm1']
        }

    def get_status(self):
        """Stato completo per API"""
        now = self.clock()
        return {
            'pv': round(self.state.pv, 2),
            'sv': round(self.state.sv, 1),
            'mv': round(self.state.mv, 1),
            'level': self.menu.current_level,
            'selected': self.menu.selected_item,
            'selected_value': self.selected_value,
            'stop_control': self.menu.stop_control,
            'autotune_active': self.autotuner.is_running,
            'locked': self.is_locked,
            'controller': self.controller.get_status(),
            'autotuner': self.autotuner.get_status(now),
            'physics': self.model.get_status(),
            'safety': self.check_safety(),
            'buttons': self.input.get_status(now),
            'params': self.params.get_all()
        }

    def _on_level_change(self, previous, level):
        self.logger.log_event('level_change', f'{previous} → {level}', self.clock())
