"""Flask web app serving the catalog JSON API.

Page rendering lives in the storefront front end; this app only exposes the
browsing, admin search and import endpoints under /api.

Run locally with ``python -m web.app``.
"""

import logging
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file before reading config
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from flask import Flask, Response, jsonify

from .api import api
from .config import (
    DB_PATH,
    FLASK_DEBUG,
    FLASK_HOST,
    FLASK_PORT,
    MAX_UPLOAD_BYTES,
    SEARCH_SCORE_CUTOFF,
    SHOP_EMAIL,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.update(
    CATALOG_DB_PATH=DB_PATH,
    SEARCH_SCORE_CUTOFF=SEARCH_SCORE_CUTOFF,
    SHOP_EMAIL=SHOP_EMAIL,
    MAX_CONTENT_LENGTH=MAX_UPLOAD_BYTES,
)
app.register_blueprint(api)


@app.errorhandler(413)
def upload_too_large(_error) -> tuple[Response, int]:
    return jsonify({"error": f"File too large (limit {MAX_UPLOAD_BYTES} bytes)"}), 413


@app.route("/health", methods=["GET"])
def health() -> Response:
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(host=FLASK_HOST, port=FLASK_PORT, debug=FLASK_DEBUG)
