import os

from flask import Blueprint, current_app, jsonify, send_from_directory

main = Blueprint('main', __name__)


def _front_dir():
    return os.path.abspath(current_app.config.get('FRONT_DIR', 'front'))


@main.route('/health')
def health():
    return jsonify({'status': 'ok'})


@main.route('/', defaults={'path': 'index.html'})
@main.route('/<path:path>')
def front(path):
    """Serve the front-end bundle."""
    front_dir = _front_dir()
    if not os.path.isfile(os.path.join(front_dir, path)):
        return jsonify({'error': 'Not found', 'path': path}), 404
    return send_from_directory(front_dir, path)
