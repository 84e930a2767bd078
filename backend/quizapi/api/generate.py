from flask import Blueprint, current_app, jsonify, request

generate = Blueprint('generate', __name__)


@generate.route('/generate', methods=['POST'])
def generate_content():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    relay = current_app.extensions['prompt_relay']
    return jsonify(relay.relay(data.get('prompt'), data.get('tools'))), 200
