"""
PID Autotuner AT-2 - Metodo Relay Feedback con Ziegler-Nichols

La sessione dura sempre AUTOTUNE_DURATION secondi:
- Relay: uscita 100% sotto il setpoint, 0% sopra
- Durante il relay registra attraversamenti del setpoint e picchi
- Alla scadenza stima Ku/Pu se le oscillazioni bastano,
  altrimenti installa le costanti di riserva del dispositivo

In ogni caso la sessione termina con una terna P/I/D valida (> 0).
"""

import math
from collections import deque

from config import (
    AUTOTUNE_DURATION,
    AUTOTUNE_RELAY_HIGH, AUTOTUNE_RELAY_LOW,
    AUTOTUNE_MIN_OSCILLATIONS,
    AUTOTUNE_FALLBACK_P, AUTOTUNE_FALLBACK_I, AUTOTUNE_FALLBACK_D
)


class RelayAutotuner:
    """
    Autotuning PID usando Relay Feedback (Åström-Hägglund).

    Il tempo è passato dal chiamante (now in secondi): nessun
    orologio interno, così la sessione è testabile in modo deterministico.
    """

    def __init__(self, duration=AUTOTUNE_DURATION):
        """
        Args:
            duration (float): Durata sessione in secondi
        """
        self.duration = duration

        # Parametri relay
        self.relay_high = AUTOTUNE_RELAY_HIGH
        self.relay_low = AUTOTUNE_RELAY_LOW

        # Stato sessione
        self.is_running = False
        self.phase = 'idle'  # idle, relay, complete
        self.start_time = None
        self.setpoint = None

        # Raccolta dati
        self.crossings = []        # [{time, direction, temp}]
        self.peaks = []            # [{time, type, temp}]
        self.temp_buffer = deque(maxlen=3)
        self.last_direction = None

        # Risultati
        self.Ku = None  # Guadagno critico
        self.Pu = None  # Periodo critico
        self.amplitude = None
        self.method = None  # 'ziegler_nichols' o 'fallback'
        self.results = None

    def start(self, now):
        """
        Avvia sessione (riavvia se già attiva)

        Args:
            now (float): Istante di avvio in secondi
        """
        self.is_running = True
        self.phase = 'relay'
        self.start_time = now
        self.setpoint = None

        self.crossings = []
        self.peaks = []
        self.temp_buffer.clear()
        self.last_direction = None
        self.Ku = None
        self.Pu = None
        self.amplitude = None
        self.method = None
        self.results = None

        print("🎯 AT-2 avviato - relay feedback")

    def stop(self):
        """Annulla sessione senza installare nuovi parametri"""
        if self.is_running:
            print("⏹️ AT-2 annullato")
        self.is_running = False
        self.phase = 'idle'

    def elapsed(self, now):
        if self.start_time is None:
            return 0.0
        return now - self.start_time

    def compute_output(self, pv, sv, now):
        """
        Calcola uscita relay e verifica scadenza sessione

        Args:
            pv (float): Temperatura attuale
            sv (float): Setpoint
            now (float): Istante corrente in secondi

        Returns:
            float: Uscita 0-100%, oppure None se non attivo
        """
        if not self.is_running:
            return None

        elapsed = self.elapsed(now)
        self.setpoint = sv

        output = self.relay_high if pv < sv else self.relay_low

        # Rileva crossing e picchi
        self.temp_buffer.append(pv)
        self._detect_crossing(pv, sv, elapsed)
        self._detect_peaks(elapsed)

        if elapsed >= self.duration:
            self._finish()

        return output

    def _detect_crossing(self, temp, sv, elapsed):
        """Rileva attraversamento del setpoint"""
        if len(self.temp_buffer) < 2:
            return

        prev_temp = self.temp_buffer[-2]

        if prev_temp < sv <= temp and self.last_direction != 'up':
            self.crossings.append({'time': elapsed, 'direction': 'up', 'temp': temp})
            self.last_direction = 'up'
        elif prev_temp > sv >= temp and self.last_direction != 'down':
            self.crossings.append({'time': elapsed, 'direction': 'down', 'temp': temp})
            self.last_direction = 'down'

    def _detect_peaks(self, elapsed):
        """Rileva picchi massimi e minimi"""
        if len(self.temp_buffer) < 3:
            return

        temps = list(self.temp_buffer)

        if temps[-3] < temps[-2] > temps[-1]:
            self.peaks.append({'time': elapsed, 'type': 'max', 'temp': temps[-2]})
        elif temps[-3] > temps[-2] < temps[-1]:
            self.peaks.append({'time': elapsed, 'type': 'min', 'temp': temps[-2]})

    def _finish(self):
        """Chiude la sessione e calcola i parametri"""
        self.is_running = False
        self.phase = 'complete'

        results = self._calculate_pid()
        if results is None:
            self.method = 'fallback'
            results = {
                'p': AUTOTUNE_FALLBACK_P,
                'i': AUTOTUNE_FALLBACK_I,
                'd': AUTOTUNE_FALLBACK_D
            }
        else:
            self.method = 'ziegler_nichols'

        self.results = results
        print(f"✅ AT-2 completato ({self.method}): "
              f"P={results['p']} I={results['i']} d={results['d']}")

    def _calculate_pid(self):
        """
        Stima Ziegler-Nichols in unità del pannello

        Returns:
            dict: {p, i, d} oppure None se i dati non bastano
        """
        if len(self.crossings) < AUTOTUNE_MIN_OSCILLATIONS * 2 + 1:
            return None

        max_peaks = [p['temp'] for p in self.peaks if p['type'] == 'max'][-3:]
        min_peaks = [p['temp'] for p in self.peaks if p['type'] == 'min'][-3:]
        if len(max_peaks) < 2 or len(min_peaks) < 2:
            return None

        # 1. Periodo critico: distanza tra crossing nella stessa direzione
        periods = [
            self.crossings[k]['time'] - self.crossings[k - 2]['time']
            for k in range(2, len(self.crossings), 2)
        ]
        self.Pu = sum(periods) / len(periods)

        # 2. Ampiezza oscillazione
        self.amplitude = (sum(max_peaks) / len(max_peaks)
                          - sum(min_peaks) / len(min_peaks)) / 2
        if self.Pu <= 0 or self.amplitude <= 0:
            return None

        # 3. Guadagno critico
        relay_amplitude = self.relay_high - self.relay_low
        self.Ku = (4 * relay_amplitude) / (math.pi * self.amplitude)

        # 4. Conversione: banda proporzionale = 100 / Kp
        kp = 0.6 * self.Ku
        return {
            'p': max(0.1, round(100.0 / kp, 1)),
            'i': max(1, int(round(0.5 * self.Pu))),
            'd': max(1, int(round(0.125 * self.Pu)))
        }

    def get_results(self):
        """Ritorna risultati finali (None se sessione non completata)"""
        if self.phase != 'complete':
            return None
        return dict(self.results)

    def get_status(self, now=None):
        """Ritorna stato corrente per API"""
        oscillations = len(self.crossings) // 2
        return {
            'running': self.is_running,
            'phase': self.phase,
            'elapsed': round(self.elapsed(now), 1) if (now is not None and self.is_running) else 0,
            'duration': self.duration,
            'oscillations': oscillations,
            'peaks': len(self.peaks),
            'method': self.method,
            'Ku': self.Ku,
            'Pu': self.Pu,
            'amplitude': self.amplitude
        }
