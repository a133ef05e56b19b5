"""
Utils - Funzioni di utilità
"""

from .formatting import format_four_digits, format_param_value, param_label

__all__ = ['format_four_digits', 'format_param_value', 'param_label']
