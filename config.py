"""
Configurazione centralizzata Simulatore Termoregolatore
"""

# ===== CAMPO DI MISURA =====
# Termocoppia K: limiti di scala del sensore
PV_MIN = -200.0        # °C - Sotto questo valore: under-range
PV_MAX = 1300.0        # °C - Sopra questo valore: over-range

# ===== STATO INIZIALE PROCESSO =====
INITIAL_PV = 22.5      # °C
INITIAL_SV = 100.0     # °C
SV_STEP = 1.0          # °C per pressione UP/DOWN

# ===== MODELLO FISICO =====
AMBIENT_TEMP = 25.0            # °C
THERMAL_INERTIA = 0.15         # Solo informativo (riportato nello stato)
COOLING_RATE = 0.025           # 1/s - Frazione di (PV - ambiente) persa al secondo
HEATER_GAIN = 15.0             # °C/s con uscita al 100%
NOISE_AMPLITUDE = 0.01         # °C - Rumore sensore ± per tick fisico

# Ingresso audio (collaboratore esterno): il volume 0-1 diventa calore
EXTERNAL_HEAT_GAIN = 80.0      # °C/s con volume pieno

# ===== TIMING =====
PHYSICS_INTERVAL = 0.1         # secondi - tick modello fisico
CONTROL_INTERVAL = 0.5         # secondi - periodo campionamento controllo
POLL_INTERVAL = 0.02           # secondi - rilevamento pressioni lunghe

# ===== PID =====
# Banda proporzionale: guadagno = 100 / P
PID_INTEGRAL_MAX = 100.0
PID_INTEGRAL_MIN = -100.0
PID_INTEGRAL_DEADBAND = 0.1    # °C - sotto questo errore l'integrale non accumula

# ===== AUTOTUNING (AT-2) =====
AUTOTUNE_DURATION = 20.0       # secondi - durata oscillazione relay
AUTOTUNE_RELAY_HIGH = 100.0    # % uscita con PV sotto setpoint
AUTOTUNE_RELAY_LOW = 0.0       # % uscita con PV sopra setpoint
AUTOTUNE_MIN_OSCILLATIONS = 2  # oscillazioni complete per stima Ziegler-Nichols

# Costanti installate quando le oscillazioni non bastano per la stima
AUTOTUNE_FALLBACK_P = 5.5
AUTOTUNE_FALLBACK_I = 180
AUTOTUNE_FALLBACK_D = 45

# ===== PARAMETRI DI DEFAULT =====
DEFAULT_PARAMS = {
    'at': 'off',
    'p': 8.0,
    'i': 240,
    'd': 40,
    'hys': 1.0,
    'in-t': 5,
    'cntl': 'pid',
    'alt1': 2,
    'oapt': 0,
}

# Valori ammessi per parametri a scelta
AT_VALUES = ('off', 'at-2')
CNTL_VALUES = ('pid', 'onof')
INPUT_TYPES = (5, 6)           # 5: K termocoppia, 6: K termocoppia decimale

# Parametri numerici a passo: {nome: passo}
PARAM_STEPS = {
    'p': 0.1,
    'i': 1,
    'd': 1,
    'hys': 0.1,
}
PARAM_FLOOR = 0.1              # Nessun parametro a passo scende sotto 0.1 con UP/DOWN

# Minimi di dominio per scrittura diretta (set_param)
PARAM_MINIMUMS = {
    'p': 0.1,
    'i': 1,
    'd': 0,
    'hys': 0.1,
}

# Parametri interi con limiti: {nome: (minimo, massimo)}
PARAM_RANGES = {
    'oapt': (0, 3),
    'alt1': (0, 3),
}

# ===== PROTEZIONE =====
PROTECTION_LOCK_LEVEL = 3      # oAPt = 3 blocca ogni modifica fuori da protezione

# ===== ALLARME 1 =====
# Tipo allarme (ALt1): 0 off, 1 deviazione sup/inf, 2 deviazione sup, 3 deviazione inf
ALARM1_DEVIATION = 5.0         # °C dal setpoint

# ===== LIVELLI E MENU =====
LEVELS = {
    'operation': ['pv_sv'],
    'adjustment': ['at', 'p', 'i', 'd', 'hys'],
    'initial': ['in-t', 'cntl', 'alt1'],
    'protection': ['oapt'],
}

DISPLAY_LABELS = {
    'at': 'At', 'p': 'P', 'i': 'I', 'd': 'd', 'hys': 'HyS',
    'in-t': 'in-t', 'cntl': 'CntL', 'alt1': 'ALt1', 'oapt': 'oAPt',
}

# ===== PULSANTI =====
BUTTONS = ('level', 'mode', 'shift', 'down', 'up')
SHORT_PRESS_MAX = 1.0          # secondi - sotto: pressione breve
LONG_PRESS_TIME = 3.0          # secondi - pressione lunga (singola o combinata)

# ===== TREND =====
TREND_HISTORY_SIZE = 250       # Campioni PV/SV/MV in memoria per grafico
EVENT_HISTORY_SIZE = 100       # Ultimi eventi in memoria

# ===== WEB SERVER =====
FLASK_HOST = '0.0.0.0'
FLASK_PORT = 5000
FLASK_DEBUG = False  # ATTENZIONE: True espone debugger interattivo sulla rete

# ===== SISTEMA =====
SYSTEM_NAME = "Simulatore Termoregolatore v1.0"
SYSTEM_VERSION = "1.0.0"
