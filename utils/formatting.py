"""
Funzioni di formattazione per il display a 4 cifre
"""

from config import DISPLAY_LABELS


def format_four_digits(value):
    """
    Formatta un valore con un decimale implicito (punto fisso sul display)

    Args:
        value (float): Valore da mostrare

    Returns:
        str: 4 caratteri, es. 100.0 → "1000", 22.5 → " 225"
    """
    text = f"{value:.1f}".replace(".", "")
    return text.rjust(4)[-4:]


def format_integer(value):
    """Formatta un intero allineato a destra su 4 caratteri"""
    return str(int(round(value))).rjust(4)[-4:]


def format_param_value(name, value):
    """
    Formatta il valore di un parametro per il display SV

    Args:
        name (str): Nome parametro
        value: Valore corrente

    Returns:
        str: Testo per il display
    """
    if name in ('p', 'hys'):
        return format_four_digits(value)
    if isinstance(value, (int, float)):
        return format_integer(value)
    return str(value).upper()


def param_label(name):
    """Etichetta parametro per il display PV"""
    return DISPLAY_LABELS.get(name, name.upper())
