"""
Simulation Runner - Thread che scandisce i tre compiti periodici

Un solo thread esegue in modo cooperativo:
- fisica    ogni PHYSICS_INTERVAL
- controllo ogni CONTROL_INTERVAL (più lento: tempo di campionamento reale)
- poll      ogni POLL_INTERVAL (pressioni lunghe)

Le richieste web girano su altri thread: ogni accesso al simulatore
passa da runner.lock.
"""

import time
import threading

from config import PHYSICS_INTERVAL, CONTROL_INTERVAL, POLL_INTERVAL


class SimulationRunner:
    """
    Scheduler dei tick del simulatore
    """

    def __init__(self, simulator, physics_interval=PHYSICS_INTERVAL,
                 control_interval=CONTROL_INTERVAL, poll_interval=POLL_INTERVAL):
        """
        Args:
            simulator (ControllerSimulator): Simulatore da far girare
        """
        self.simulator = simulator
        self.physics_interval = physics_interval
        self.control_interval = control_interval
        self.poll_interval = poll_interval

        self.lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread = None
        self.is_running = False

        self._cycles = 0
        self._last_error = None

    def start(self):
        """Avvia thread"""
        if self.is_running:
            return

        self._stop_event.clear()
        self.is_running = True
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()
        print("✅ Thread simulazione avviato")

    def stop(self):
        """Ferma thread e attende la fine del ciclo corrente"""
        if not self.is_running:
            return

        self._stop_event.set()
        self.is_running = False
        if self._thread is not None:
            self._thread.join(timeout=2)
        print("⏹️ Thread simulazione fermato")

    def run_due_tasks(self, now, schedule):
        """
        Esegue i compiti scaduti e aggiorna le prossime scadenze

        Args:
            now (float): Istante corrente
            schedule (dict): {'physics', 'control', 'poll'} → prossima scadenza
        """
        with self.lock:
            if now >= schedule['physics']:
                self.simulator.tick_physics(now)
                schedule['physics'] = now + self.physics_interval
            if now >= schedule['control']:
                self.simulator.tick_control(now)
                schedule['control'] = now + self.control_interval
            if now >= schedule['poll']:
                self.simulator.poll(now)
                schedule['poll'] = now + self.poll_interval
        self._cycles += 1

    def _run_loop(self):
        """Loop principale"""
        clock = self.simulator.clock
        start = clock()
        # Il primo controllo parte dopo almeno un tick fisico
        schedule = {
            'physics': start + self.physics_interval,
            'control': start + self.control_interval,
            'poll': start
        }

        while not self._stop_event.is_set():
            try:
                self.run_due_tasks(clock(), schedule)
            except Exception as e:
                # Il loop non deve MAI fermarsi per un errore singolo
                self._last_error = str(e)
                print(f"⚠️ Errore nel ciclo di simulazione (continuo): {e}")

            next_due = min(schedule.values())
            self._stop_event.wait(max(0.0, min(self.poll_interval, next_due - clock())))

    def get_status(self):
        return {
            'running': self.is_running,
            'cycles': self._cycles,
            'last_error': self._last_error,
            'intervals': {
                'physics': self.physics_interval,
                'control': self.control_interval,
                'poll': self.poll_interval
            }
        }
