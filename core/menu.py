"""
Livelli e Menu del pannello frontale

- operation: PV/SV (livello di default)
- adjustment: AT, P, I, d, HyS
- initial: impostazioni iniziali (il controllo si ferma)
- protection: oAPt
"""

from config import LEVELS


class LevelMenu:
    """
    Macchina a stati del livello corrente e del parametro selezionato
    """

    def __init__(self, levels=None, on_level_change=None):
        """
        Args:
            levels (dict): {livello: [parametri]} (default: LEVELS)
            on_level_change (callable): Chiamata con (vecchio, nuovo) livello
        """
        self.levels = levels if levels is not None else LEVELS
        self.current_level = 'operation'
        self.menu_index = 0
        self.stop_control = False
        self.on_level_change = on_level_change

    @property
    def items(self):
        return self.levels[self.current_level]

    @property
    def selected_item(self):
        return self.items[self.menu_index]

    def switch_to_level(self, level):
        """
        Entra in un livello: indice menu a 0.
        Nel livello impostazioni iniziali il controllo si ferma.

        Returns:
            bool: True se il livello è cambiato
        """
        if level not in self.levels:
            print(f"⚠️ Livello sconosciuto: {level}")
            return False
        if level == self.current_level:
            return False

        previous = self.current_level
        self.current_level = level
        self.menu_index = 0
        self.stop_control = (level == 'initial')

        print(f"📟 Livello {level.upper()}")
        if self.on_level_change is not None:
            self.on_level_change(previous, level)
        return True

    def navigate_level(self):
        """Pressione breve LEVEL: operation ↔ adjustment, dai livelli profondi torna a operation"""
        if self.current_level == 'operation':
            self.switch_to_level('adjustment')
        else:
            self.switch_to_level('operation')

    def navigate_menu(self):
        """Pressione breve MODE: parametro successivo (ciclico)"""
        self.menu_index = (self.menu_index + 1) % len(self.items)

    def get_status(self):
        return {
            'level': self.current_level,
            'menu_index': self.menu_index,
            'selected': self.selected_item,
            'stop_control': self.stop_control
        }
