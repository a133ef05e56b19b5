#!/usr/bin/env python3
"""
Simulatore Termoregolatore v1.0 - Server API
Pannello frontale, grafico e ingresso audio sono client esterni:
questo server espone solo stato e comandi del simulatore.
"""

from flask import Flask, jsonify, request
from flask_cors import CORS

# Import moduli custom
from config import *
from core import ControllerSimulator, SimulationRunner

# ===== INIZIALIZZAZIONE FLASK =====
app = Flask(__name__)
CORS(app)

# ===== INIZIALIZZAZIONE COMPONENTI =====
print("=" * 60)
print(f"{SYSTEM_NAME}")
print("=" * 60)

simulator = ControllerSimulator()
runner = SimulationRunner(simulator)

print("✅ Tutti i componenti inizializzati")
print("=" * 60)


# ===== ROUTES STATO =====

@app.route('/api/status')
def get_status():
    """API stato sistema completo"""
    with runner.lock:
        status = simulator.get_status()
    return jsonify({
        'system': {
            'name': SYSTEM_NAME,
            'version': SYSTEM_VERSION
        },
        'simulator': status,
        'runner': runner.get_status()
    })


@app.route('/api/display')
def get_display():
    """Testo display e indicatori del pannello"""
    with runner.lock:
        return jsonify({
            'display': simulator.get_display(),
            'indicators': simulator.get_indicators(),
            'level': simulator.level,
            'mv': round(simulator.mv, 1)
        })


@app.route('/api/parameters')
def get_parameters():
    """Parametri di regolazione"""
    with runner.lock:
        return jsonify(simulator.params.get_all())


@app.route('/api/trend')
def get_trend():
    """Dati per grafico PV/SV/MV"""
    with runner.lock:
        return jsonify(simulator.logger.get_chart_data())


@app.route('/api/events')
def get_events():
    """Registro eventi"""
    with runner.lock:
        return jsonify(simulator.logger.get_current_log()['events'])


# ===== ROUTES PULSANTI =====

@app.route('/api/buttons/<button_id>/down', methods=['POST'])
def button_down(button_id):
    """Tasto premuto"""
    if button_id not in BUTTONS:
        return jsonify({'success': False, 'error': 'Tasto sconosciuto'}), 404
    with runner.lock:
        created = simulator.on_button_down(button_id)
    return jsonify({'success': True, 'created': created})


@app.route('/api/buttons/<button_id>/up', methods=['POST'])
def button_up(button_id):
    """Tasto rilasciato"""
    if button_id not in BUTTONS:
        return jsonify({'success': False, 'error': 'Tasto sconosciuto'}), 404
    with runner.lock:
        handled = simulator.on_button_up(button_id)
        level = simulator.level
    return jsonify({'success': True, 'short_press': handled, 'level': level})


# ===== ROUTES AMBIENTE =====

@app.route('/api/environment', methods=['POST'])
def set_environment():
    """Imposta ambiente: temperatura, carico, sensore, calore esterno"""
    try:
        data = request.json or {}
        with runner.lock:
            if 'ambient_temp' in data:
                simulator.set_ambient_temp(float(data['ambient_temp']))
            if 'cooling_rate' in data:
                simulator.set_cooling_rate(float(data['cooling_rate']))
            if 'sensor_connected' in data:
                simulator.set_sensor_connected(bool(data['sensor_connected']))
            if 'external_heat_input' in data:
                simulator.set_external_heat_input(float(data['external_heat_input']))
            if 'volume' in data:
                simulator.set_external_volume(float(data['volume']),
                                              float(data.get('gain', 1.0)))
            physics = simulator.model.get_status()
        return jsonify({'success': True, 'physics': physics})
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)})


# ===== CLEANUP =====
def cleanup():
    """Cleanup alla chiusura"""
    print("\n🧹 Cleanup sistema...")
    runner.stop()
    print("✅ Cleanup completato")


import atexit
atexit.register(cleanup)


# ===== MAIN =====
if __name__ == '__main__':
    # Avvia thread simulazione
    runner.start()

    # Avvia Flask
    print(f"🌐 Server web: http://{FLASK_HOST}:{FLASK_PORT}")
    print("=" * 60)
    print("Premi CTRL+C per fermare")
    print("=" * 60)

    app.run(
        host=FLASK_HOST,
        port=FLASK_PORT,
        debug=FLASK_DEBUG,
        use_reloader=False
    )
