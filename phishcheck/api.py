"""Main Flask API for PhishCheck.

Run: python -m phishcheck.api
"""

import os
import logging
from flask import Flask, request, jsonify, abort
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import redis as redis_lib

from phishcheck import db
from phishcheck.app.config import Thresholds
from phishcheck.app.scanner import get_detector

# Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("api")

# Flask app
app = Flask(__name__)

# Rate limiter: prefer Redis storage in production when REDIS_URL is set
REDIS_URL = os.getenv("REDIS_URL")
if REDIS_URL:
    try:
        redis_client = redis_lib.from_url(REDIS_URL)
        redis_client.ping()
        limiter = Limiter(app=app, key_func=get_remote_address,
                          default_limits=["60 per minute"], storage_uri=REDIS_URL)
        logger.info("Using Redis at %s for rate limiting", REDIS_URL)
    except Exception:
        logger.exception("Failed to connect to Redis, falling back to in-memory limiter")
        limiter = Limiter(app=app, key_func=get_remote_address, default_limits=["60 per minute"])
else:
    limiter = Limiter(app=app, key_func=get_remote_address, default_limits=["60 per minute"])

# API key
API_KEY = os.getenv("PHISHCHECK_API_KEY", None)
if API_KEY:
    logger.info("API key enabled")

db.init_db()


def require_api_key() -> None:
    if not API_KEY:
        return
    key = request.headers.get("X-API-Key") or request.args.get("api_key")
    if not key or key != API_KEY:
        abort(401, description="Invalid or missing API key")


@app.errorhandler(401)
def unauthorized(e):
    return jsonify({"error": "unauthorized", "detail": e.description}), 401


@app.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok", "version": "1.0"})


@app.route("/analyze", methods=["POST"])
@limiter.limit("30 per minute")
def analyze():
    require_api_key()
    data = request.get_json(silent=True)
    if not data or "url" not in data:
        return jsonify({"error": "missing 'url' in JSON body"}), 400
    if not isinstance(data["url"], str):
        return jsonify({"error": "'url' must be a string"}), 400

    url = data["url"]
    if not url.strip():
        return jsonify({"error": "empty url"}), 400

    # analyzed and stored exactly as submitted
    result = get_detector().analyze(url).to_dict()

    try:
        result["scan_id"] = db.record_scan(result)
    except Exception:
        # the verdict is still useful without history
        logger.exception("Failed to record scan for %s", url)
        result["scan_id"] = None

    return jsonify(result), 200


@app.route("/history", methods=["GET"])
@limiter.limit("20 per minute")
def history():
    require_api_key()
    try:
        limit = int(request.args.get("limit", 10))
        page = int(request.args.get("page", 0))
    except ValueError:
        return jsonify({"error": "limit/page must be integer"}), 400
    limit = min(200, max(1, limit))
    offset = max(0, page) * limit
    rows = db.list_scans(limit=limit, offset=offset)
    return jsonify({"count": len(rows), "rows": rows})


@app.route("/history", methods=["DELETE"])
def clear_history():
    require_api_key()
    deleted = db.clear_history()
    return jsonify({"deleted": deleted})


@app.route("/history/<int:scan_id>", methods=["GET"])
@limiter.limit("20 per minute")
def get_history_item(scan_id: int):
    require_api_key()
    item = db.get_scan(scan_id)
    if not item:
        return jsonify({"error": "not_found"}), 404
    return jsonify(item)


@app.route("/stats", methods=["GET"])
def stats():
    require_api_key()
    return jsonify(db.get_stats())


@app.route('/config/thresholds', methods=['GET', 'POST'])
def config_thresholds():
    """GET returns current thresholds; POST with JSON {"high": 70, "medium": 40, "low": 20} replaces them."""
    require_api_key()
    detector = get_detector()
    if request.method == 'GET':
        return jsonify(detector.config.thresholds.as_dict()), 200
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({'error': 'expected JSON object with high/medium/low'}), 400
    unknown = set(data) - {'high', 'medium', 'low'}
    if unknown:
        return jsonify({'error': 'unknown threshold keys', 'detail': sorted(unknown)}), 400
    merged = detector.config.thresholds.as_dict()
    merged.update(data)
    try:
        thresholds = Thresholds(**merged)
    except ValueError as e:
        return jsonify({'error': 'invalid thresholds', 'detail': str(e)}), 400
    detector.reload(detector.config.replace(thresholds=thresholds))
    logger.info("Thresholds updated: %s", thresholds.as_dict())
    return jsonify(thresholds.as_dict()), 200


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 5050)), debug=False)
