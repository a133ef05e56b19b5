"""
Core - Logica del termoregolatore simulato
"""

from .process_model import ProcessState, PhysicsConfig, ProcessModel
from .pid_controller import PIDController
from .autotuner import RelayAutotuner
from .controller import Controller
from .parameters import ParameterStore
from .menu import LevelMenu
from .input_dispatcher import InputDispatcher, ButtonHoldRecord
from .safety_monitor import SafetyMonitor
from .data_logger import DataLogger
from .simulator import ControllerSimulator
from .runner import SimulationRunner

__all__ = [
    'ProcessState', 'PhysicsConfig', 'ProcessModel',
    'PIDController', 'RelayAutotuner', 'Controller',
    'ParameterStore', 'LevelMenu', 'InputDispatcher', 'ButtonHoldRecord',
    'SafetyMonitor', 'DataLogger',
    'ControllerSimulator', 'SimulationRunner'
]
