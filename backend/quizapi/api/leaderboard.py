from flask import Blueprint, current_app, jsonify, request

leaderboard = Blueprint('leaderboard', __name__)


def _service():
    return current_app.extensions['leaderboard']


@leaderboard.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    entries = _service().top_scores(request.args.get('limit'))
    return jsonify({'scores': [e.to_dict() for e in entries]})


@leaderboard.route('/leaderboard', methods=['POST'])
def post_score():
    data = request.get_json(silent=True) or {}
    result = _service().submit(data)
    return jsonify({'score': result.entry.to_dict()}), 201
