from flask import Blueprint, jsonify

health_bp = Blueprint('health_api', __name__)


@health_bp.route('/', methods=['GET'])
def index():
    return jsonify({'message': 'Acadmix PDF service'})


@health_bp.route('/api/health', methods=['GET'])
def health():
    return jsonify({'status': 'OK'})


@health_bp.route('/api/ping', methods=['GET'])
def ping():
    return jsonify({'pong': True})


@health_bp.route('/healthz', methods=['GET'])
def healthz():
    return jsonify({'status': 'ok'}), 200
