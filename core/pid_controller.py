"""
Controller PID in forma a banda proporzionale (2-PID del termoregolatore)
"""

from config import (
    CONTROL_INTERVAL,
    PID_INTEGRAL_MAX, PID_INTEGRAL_MIN,
    PID_INTEGRAL_DEADBAND
)


class PIDController:
    """
    PID con banda proporzionale, derivata sulla misura e anti-windup.

    I parametri P/I/D sono letti dal ParameterStore ad ogni ciclo:
    P è una banda (P più grande = risposta più morbida), non un guadagno.
    """

    def __init__(self, control_period=CONTROL_INTERVAL):
        """
        Args:
            control_period (float): Periodo di campionamento in secondi
        """
        self.control_period = control_period

        # Stato interno
        self.integral = 0.0

        # Limiti anti-windup integrale
        self.integral_max = PID_INTEGRAL_MAX
        self.integral_min = PID_INTEGRAL_MIN

        # Stato ultimo calcolo, per diagnostica
        self.last_output = 0.0
        self.last_error = 0.0
        self.last_p_term = 0.0
        self.last_i_term = 0.0
        self.last_d_term = 0.0

    def compute(self, state, p, i, d):
        """
        Calcola uscita PID e aggiorna state.mv e state.last_pv

        Args:
            state (ProcessState): PV, SV e PV del ciclo precedente
            p (float): Banda proporzionale
            i (float): Tempo integrale
            d (float): Tempo derivativo

        Returns:
            float: Uscita 0-100%
        """
        pv = state.pv
        sv = state.sv
        last_pv = state.last_pv
        gain = 100.0 / p

        error = sv - pv

        # Termine proporzionale
        p_term = gain * error

        # Integrale solo fuori dalla banda morta (niente deriva vicino al setpoint)
        if abs(error) > PID_INTEGRAL_DEADBAND:
            self.integral += error / i
        self.integral = max(self.integral_min, min(self.integral_max, self.integral))

        # Attraversamento setpoint: dimezza integrale (smorza overshoot)
        if (last_pv < sv <= pv) or (last_pv > sv >= pv):
            self.integral *= 0.5

        i_term = self.integral

        # Derivata sulla misura: nessun picco quando cambia il setpoint
        d_term = gain * d * (last_pv - pv) / self.control_period

        output = max(0.0, min(100.0, p_term + i_term + d_term))

        state.mv = output
        state.last_pv = pv

        self.last_output = output
        self.last_error = error
        self.last_p_term = p_term
        self.last_i_term = i_term
        self.last_d_term = d_term

        return output

    def get_terms(self):
        """
        Ritorna i termini dell'ultimo calcolo PID.

        Returns:
            dict: {p, i, d, error, output, integral}
        """
        return {
            'p': round(self.last_p_term, 3),
            'i': round(self.last_i_term, 3),
            'd': round(self.last_d_term, 3),
            'error': round(self.last_error, 2),
            'output': round(self.last_output, 1),
            'integral': round(self.integral, 2)
        }

    def reset(self):
        """Reset integrale (fail-safe o sensore scollegato)"""
        self.integral = 0.0
        self.last_p_term = 0.0
        self.last_i_term = 0.0
        self.last_d_term = 0.0

    def get_status(self):
        """Stato completo PID per diagnostica"""
        return {
            'integral': round(self.integral, 2),
            'control_period': self.control_period,
            'last_error': round(self.last_error, 2),
            'last_output': round(self.last_output, 1),
            'last_p': round(self.last_p_term, 3),
            'last_i': round(self.last_i_term, 3),
            'last_d': round(self.last_d_term, 3)
        }
