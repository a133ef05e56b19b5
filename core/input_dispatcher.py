"""
Input Dispatcher - Da pressioni tasti a comandi di navigazione

Ogni tasto premuto ha un record {start_time, handled}.
Le pressioni lunghe (3s) scattano DURANTE la pressione tramite
check_long_presses(); il tasto che le ha generate viene marcato
handled e al rilascio non produce anche l'azione breve.
"""

from dataclasses import dataclass

from config import BUTTONS, SHORT_PRESS_MAX, LONG_PRESS_TIME


@dataclass
class ButtonHoldRecord:
    """Esiste solo mentre il tasto è premuto"""
    start_time: float
    handled: bool = False


class InputDispatcher:
    """
    Converte eventi down/up e tempi di pressione in comandi
    """

    def __init__(self, menu, adjust):
        """
        Args:
            menu (LevelMenu): Macchina a stati livelli
            adjust (callable): adjust(direction) sul parametro selezionato
        """
        self.menu = menu
        self.adjust = adjust
        self.hold_records = {}

    def is_held(self, button_id):
        return button_id in self.hold_records

    def on_button_down(self, button_id, timestamp):
        """
        Crea il record di pressione (ignora down duplicati)

        Returns:
            bool: True se è stato creato un nuovo record
        """
        if button_id not in BUTTONS:
            print(f"⚠️ Tasto sconosciuto: {button_id}")
            return False
        if button_id in self.hold_records:
            return False

        self.hold_records[button_id] = ButtonHoldRecord(start_time=timestamp)
        return True

    def on_button_up(self, button_id, timestamp):
        """
        Rilascio: azione breve se non già gestito da pressione lunga

        Returns:
            bool: True se è stata eseguita un'azione breve
        """
        record = self.hold_records.pop(button_id, None)
        if record is None:
            return False
        if record.handled:
            return False

        duration = timestamp - record.start_time
        if duration >= SHORT_PRESS_MAX:
            return False

        return self._dispatch_short_press(button_id)

    def _dispatch_short_press(self, button_id):
        if button_id == 'level':
            self.menu.navigate_level()
        elif button_id == 'mode':
            self.menu.navigate_menu()
        elif button_id == 'up':
            self.adjust(1)
        elif button_id == 'down':
            self.adjust(-1)
        else:
            return False
        return True

    def check_long_presses(self, now):
        """
        Da chiamare di continuo mentre un tasto è premuto.
        LEVEL + MODE (protezione) ha precedenza su LEVEL da solo (iniziale).

        Returns:
            str: Livello raggiunto, oppure None
        """
        level_rec = self.hold_records.get('level')
        mode_rec = self.hold_records.get('mode')

        # LEVEL + MODE (3s) → protezione
        if level_rec and mode_rec and not level_rec.handled and not mode_rec.handled:
            joint_time = min(now - level_rec.start_time, now - mode_rec.start_time)
            if joint_time >= LONG_PRESS_TIME:
                self.menu.switch_to_level('protection')
                level_rec.handled = True
                mode_rec.handled = True
                return 'protection'
            return None

        # LEVEL da solo (3s) → impostazioni iniziali
        if level_rec and not level_rec.handled and mode_rec is None:
            if now - level_rec.start_time >= LONG_PRESS_TIME:
                self.menu.switch_to_level('initial')
                level_rec.handled = True
                return 'initial'

        return None

    def get_status(self, now=None):
        return {
            button_id: {
                'held_for': round(now - record.start_time, 2) if now is not None else None,
                'handled': record.handled
            }
            for button_id, record in self.hold_records.items()
        }
