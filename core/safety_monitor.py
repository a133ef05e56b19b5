"""
Monitor Sicurezza - Classifica condizioni anomale e allarme 1

Nessuna condizione solleva eccezioni: il risultato serve al display
(S.Err, oooo) e agli indicatori del pannello.
"""

from config import PV_MIN, PV_MAX, ALARM1_DEVIATION


class SafetyMonitor:
    """
    Valuta sensore, fuori scala e allarme di deviazione
    """

    def __init__(self, deviation=ALARM1_DEVIATION):
        self.deviation = deviation
        self.alarms = []
        self.is_safe = True
        self.alarm1 = False

    def check_all(self, pv, sv, sensor_connected=True, alarm_type=0):
        """
        Esegue tutti i controlli

        Args:
            pv (float): Temperatura processo (°C)
            sv (float): Setpoint (°C)
            sensor_connected (bool): Stato sensore
            alarm_type (int): ALt1 (0 off, 1 dev. sup/inf, 2 dev. sup, 3 dev. inf)

        Returns:
            dict: {is_safe, alarms, alarm1}
        """
        self.alarms = []

        # ===== CONTROLLO 1: Sensore =====
        if not sensor_connected:
            self.alarms.append({
                'level': 'CRITICAL',
                'code': 'SENSOR_ERROR',
                'message': 'Sensore scollegato',
                'value': None,
                'limit': 'connected'
            })

        # ===== CONTROLLO 2: Fuori scala =====
        elif pv >= PV_MAX:
            self.alarms.append({
                'level': 'CRITICAL',
                'code': 'OVER_RANGE',
                'message': f'PV oltre fondo scala: {pv:.1f}°C',
                'value': pv,
                'limit': PV_MAX
            })
        elif pv <= PV_MIN:
            self.alarms.append({
                'level': 'CRITICAL',
                'code': 'UNDER_RANGE',
                'message': f'PV sotto inizio scala: {pv:.1f}°C',
                'value': pv,
                'limit': PV_MIN
            })

        # ===== CONTROLLO 3: Allarme 1 (deviazione dal setpoint) =====
        self.alarm1 = sensor_connected and self._deviation_alarm(pv, sv, alarm_type)
        if self.alarm1:
            self.alarms.append({
                'level': 'WARNING',
                'code': 'ALARM1',
                'message': f'Deviazione PV-SV: {pv - sv:+.1f}°C',
                'value': round(pv - sv, 1),
                'limit': self.deviation
            })

        self.is_safe = len([a for a in self.alarms if a['level'] == 'CRITICAL']) == 0

        return {
            'is_safe': self.is_safe,
            'alarms': self.alarms,
            'alarm1': self.alarm1
        }

    def _deviation_alarm(self, pv, sv, alarm_type):
        deviation = pv - sv
        if alarm_type == 1:
            return abs(deviation) > self.deviation
        if alarm_type == 2:
            return deviation > self.deviation
        if alarm_type == 3:
            return deviation < -self.deviation
        return False

    def get_status(self):
        return {
            'is_safe': self.is_safe,
            'alarm1': self.alarm1,
            'alarms': self.alarms
        }
