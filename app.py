import logging
import os

from flask import Flask, jsonify
from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from mock_routes import mock_bp, init_mock_bp


logging.basicConfig(
    level=os.environ.get("ZKTRACE_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def open_db(path=None):
    """ZKTRACE_DB 경로의 TinyDB. ":memory:" 이면 MemoryStorage."""
    path = path or os.environ.get("ZKTRACE_DB", "db.json")
    if path == ":memory:":
        return TinyDB(storage=MemoryStorage)  # Memory DB
    return TinyDB(path)                       # Storage DB


def create_app(db=None):
    app = Flask(__name__)
    app.secret_key = os.environ.get("ZKTRACE_SECRET_KEY", "key")

    if db is None:
        db = open_db()
    init_mock_bp(db.table("mock"))
    app.register_blueprint(mock_bp)

    @app.route("/")
    def index():
        return jsonify({
            "service": "zktrace",
            "endpoints": ["/mock/circuits", "/mock/run/<name>", "/mock/reset"],
        })

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
