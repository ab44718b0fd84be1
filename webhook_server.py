# webhook_server.py - health checks for the hosting platform
from flask import Flask, jsonify
from datetime import datetime
import logging
import threading

from config import PORT
from database.db import test_connection as database_ok

logger = logging.getLogger(__name__)

app = Flask(__name__)


def health_payload():
    return {
        "status": "ok" if database_ok() else "degraded",
        "service": "SkillSwap Marketplace Bot",
        "timestamp": datetime.now().isoformat()
    }


@app.route('/', methods=['GET'])
def index():
    return jsonify(health_payload()), 200


@app.route('/health', methods=['GET'])
def health():
    payload = health_payload()
    return jsonify(payload), 200 if payload["status"] == "ok" else 503


def start_health_server(port=PORT):
    """Run the health app on a daemon thread next to the bot"""
    thread = threading.Thread(
        target=lambda: app.run(host='0.0.0.0', port=port, use_reloader=False),
        name='health-server',
        daemon=True
    )
    thread.start()
    logger.info(f"🌐 Health server listening on port {port}")
    return thread


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=PORT)
