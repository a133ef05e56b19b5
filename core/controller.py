"""
Controller - Scelta algoritmo di controllo ad ogni ciclo

Priorità:
1. Sensore scollegato o controllo fermo (livello impostazioni iniziali)
   → uscita 0%, integrale azzerato
2. Autotuning attivo → relay AT-2
3. Parametro cntl → PID oppure ON/OFF
"""

from .pid_controller import PIDController
from .autotuner import RelayAutotuner


class Controller:
    """
    Calcola MV (0-100%) da PV, SV e parametri di regolazione
    """

    def __init__(self, state, params, pid=None, autotuner=None):
        """
        Args:
            state (ProcessState): Stato processo condiviso
            params (ParameterStore): Parametri di regolazione
            pid (PIDController): Algoritmo PID
            autotuner (RelayAutotuner): Sessione AT-2 (condivisa con params)
        """
        self.state = state
        self.params = params
        self.pid = pid if pid is not None else PIDController()
        self.autotuner = autotuner if autotuner is not None else params.autotuner
        if self.autotuner is None:
            self.autotuner = RelayAutotuner()

        self.mode = 'pid' if params.get('cntl') == 'pid' else 'onof'

    def tick(self, now, sensor_connected=True, stop_control=False):
        """
        Un ciclo di controllo

        Args:
            now (float): Istante corrente in secondi
            sensor_connected (bool): False = guasto sensore
            stop_control (bool): True nel livello impostazioni iniziali

        Returns:
            float: Nuova uscita MV
        """
        # Fail-safe: ha priorità su qualsiasi modalità in corso
        if not sensor_connected or stop_control:
            self.state.mv = 0.0
            self.pid.reset()
            self.mode = 'stopped'
            return self.state.mv

        if self.autotuner.is_running:
            self.mode = 'autotuning'
            self._run_autotune(now)
            return self.state.mv

        if self.params.get('cntl') == 'pid':
            self.mode = 'pid'
            self.pid.compute(
                self.state,
                self.params.get('p'),
                self.params.get('i'),
                self.params.get('d')
            )
        else:
            self.mode = 'onof'
            self._run_on_off()

        return self.state.mv

    def _run_on_off(self):
        """ON/OFF con isteresi: nella banda morta l'uscita resta invariata"""
        diff = self.state.pv - self.state.sv
        if diff < -self.params.get('hys'):
            self.state.mv = 100.0
        elif diff > 0:
            self.state.mv = 0.0

    def _run_autotune(self, now):
        """Relay AT-2; alla scadenza installa i parametri identificati"""
        output = self.autotuner.compute_output(self.state.pv, self.state.sv, now)
        if output is not None:
            self.state.mv = output

        if not self.autotuner.is_running:
            results = self.autotuner.get_results()
            self.params.install_tuning(results['p'], results['i'], results['d'])
            self.mode = 'pid'

    def get_mode(self):
        """Modalità corrente: stopped, autotuning, pid, onof"""
        return self.mode

    def get_status(self):
        return {
            'mode': self.mode,
            'mv': round(self.state.mv, 1),
            'pid': self.pid.get_status()
        }
