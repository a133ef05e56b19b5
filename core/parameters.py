"""
Parameter Store - Parametri di regolazione con regole di modifica per tipo
"""

import math
import time

from config import (
    DEFAULT_PARAMS,
    AT_VALUES, CNTL_VALUES, INPUT_TYPES,
    PARAM_STEPS, PARAM_FLOOR, PARAM_MINIMUMS, PARAM_RANGES,
    PROTECTION_LOCK_LEVEL
)


class ParameterStore:
    """
    Parametri nominati del termoregolatore.

    adjust_param applica le regole dei tasti UP/DOWN (passo, limiti,
    scelta); set_param scrive un valore diretto validandolo.
    Con oAPt = 3 ogni modifica da tasti è bloccata fuori dal livello
    protezione.
    """

    def __init__(self, autotuner=None, clock=time.time, values=None):
        """
        Args:
            autotuner (RelayAutotuner): Sessione AT avviata dal parametro 'at'
            clock (callable): Orologio in secondi per l'avvio AT
            values (dict): Valori iniziali (default: DEFAULT_PARAMS)
        """
        self.autotuner = autotuner
        self.clock = clock
        self.values = dict(DEFAULT_PARAMS)
        if values:
            self.values.update(values)

    def get(self, name):
        return self.values[name]

    def get_all(self):
        """Copia di tutti i parametri"""
        return dict(self.values)

    def is_locked(self, level):
        """True se la protezione blocca le modifiche in questo livello"""
        return self.values['oapt'] == PROTECTION_LOCK_LEVEL and level != 'protection'

    def set_param(self, name, value):
        """
        Scrive un parametro validandone il valore

        Args:
            name (str): Nome parametro
            value: Nuovo valore

        Returns:
            bool: True se scritto
        """
        if name not in self.values:
            print(f"⚠️ Parametro sconosciuto: {name}")
            return False

        if name == 'at':
            if value not in AT_VALUES:
                print(f"⚠️ Valore non valido per at: {value}")
                return False
            self.values['at'] = value
            if self.autotuner is not None:
                if value == 'at-2':
                    self.autotuner.start(self.clock())
                else:
                    self.autotuner.stop()
            return True

        if name == 'cntl':
            if value not in CNTL_VALUES:
                print(f"⚠️ Valore non valido per cntl: {value}")
                return False
            self.values['cntl'] = value
            return True

        if name == 'in-t':
            if value not in INPUT_TYPES:
                print(f"⚠️ Valore non valido per in-t: {value}")
                return False
            self.values['in-t'] = value
            return True

        try:
            value = float(value)
        except (TypeError, ValueError):
            print(f"⚠️ Valore non numerico per {name}: {value}")
            return False
        if not math.isfinite(value):
            print(f"⚠️ Valore non numerico per {name}: {value}")
            return False

        if name in PARAM_RANGES:
            low, high = PARAM_RANGES[name]
            self.values[name] = max(low, min(high, int(value)))
            return True

        # Parametri numerici: solo minimo di dominio
        value = max(PARAM_MINIMUMS[name], value)
        if name in ('i', 'd'):
            value = int(round(value))
        self.values[name] = value
        return True

    def adjust_param(self, name, direction, level=None):
        """
        Applica pressione UP (+1) o DOWN (-1) a un parametro

        Args:
            name (str): Nome parametro
            direction (int): +1 o -1
            level (str): Livello corrente (per il blocco protezione)

        Returns:
            bool: True se il parametro è stato modificato
        """
        # Blocco protezione
        if self.is_locked(level):
            return False

        if name not in self.values:
            print(f"⚠️ Parametro sconosciuto: {name}")
            return False

        if name == 'at':
            if direction > 0:
                self.values['at'] = 'at-2'
                if self.autotuner is not None:
                    self.autotuner.start(self.clock())
            else:
                self.values['at'] = 'off'
                if self.autotuner is not None:
                    self.autotuner.stop()

        elif name == 'cntl':
            self.values['cntl'] = 'pid' if direction > 0 else 'onof'

        elif name == 'in-t':
            self.values['in-t'] = INPUT_TYPES[1] if direction > 0 else INPUT_TYPES[0]

        elif name in PARAM_RANGES:
            low, high = PARAM_RANGES[name]
            self.values[name] = min(high, max(low, self.values[name] + direction))

        else:
            step = PARAM_STEPS[name]
            value = round(self.values[name] + direction * step, 1)
            self.values[name] = max(PARAM_FLOOR, value)

        return True

    def install_tuning(self, p, i, d):
        """
        Installa parametri da autotuning: AT off, controllo PID

        Args:
            p, i, d: Nuovi parametri (validi e > 0)
        """
        self.values['at'] = 'off'
        self.values['cntl'] = 'pid'
        self.values['p'] = p
        self.values['i'] = i
        self.values['d'] = d
        print(f"⚙️ PID da autotuning: P={p} I={i} d={d}")
