from flask import Blueprint, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({
        'message': 'Quiz leaderboard API',
        'endpoints': ['GET /leaderboard', 'POST /leaderboard', 'POST /generate'],
    })

@main.route('/health')
def health():
    return jsonify({'status': 'ok'})
