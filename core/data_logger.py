"""
Data Logger - Trend PV/SV/MV ed eventi in memoria
"""

from collections import deque

from config import TREND_HISTORY_SIZE, EVENT_HISTORY_SIZE


class DataLogger:
    """
    Buffer circolare dei campioni di controllo più registro eventi.

    Nessun salvataggio su disco: i dati servono al grafico e alla
    diagnostica finché il simulatore è in esecuzione.
    """

    def __init__(self, history_size=TREND_HISTORY_SIZE, event_history_size=EVENT_HISTORY_SIZE):
        self.start_time = None
        self.samples = deque(maxlen=history_size)
        self.events = deque(maxlen=event_history_size)

    def log_sample(self, now, pv, sv, mv):
        """
        Registra un campione di controllo

        Args:
            now (float): Istante in secondi
            pv, sv (float): Temperature (°C)
            mv (float): Uscita 0-100%
        """
        if self.start_time is None:
            self.start_time = now

        self.samples.append({
            'time': round(now - self.start_time, 2),
            'pv': round(pv, 1),
            'sv': round(sv, 1),
            'mv': round(mv, 1)
        })

    def log_event(self, event_type, message, now=None):
        """
        Registra evento

        Args:
            event_type (str): level_change, autotune_start, autotune_stop,
                              autotune_complete, sensor_fault, sensor_restored
            message (str): Descrizione evento
            now (float): Istante in secondi
        """
        elapsed = 0
        if now is not None and self.start_time is not None:
            elapsed = round(now - self.start_time, 2)

        self.events.append({
            'time': elapsed,
            'type': event_type,
            'message': message,
            'timestamp': now
        })

        print(f"📌 [{event_type}] {message}")

    def get_chart_data(self):
        """Serie separate per grafico"""
        return {
            'time': [s['time'] for s in self.samples],
            'pv': [s['pv'] for s in self.samples],
            'sv': [s['sv'] for s in self.samples],
            'mv': [s['mv'] for s in self.samples]
        }

    def get_current_log(self):
        """Log corrente (per API)"""
        return {
            'samples': list(self.samples),
            'events': list(self.events),
            'samples_count': len(self.samples),
            'events_count': len(self.events)
        }

    def reset(self):
        self.start_time = None
        self.samples.clear()
        self.events.clear()
