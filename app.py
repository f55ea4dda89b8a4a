"""
PCS 인터랙티브 학습 앱
=======================

레이블 다항식을 등록하고 커밋/열기/검증 과정을 JSON API로 따라가 본다.

설정 (기본값 → ``create_app(config)`` 인자 → ``PCS_`` 접두사 환경변수 순으로 덮어씀):
    DB_PATH:          TinyDB 파일 경로. None이면 메모리 저장소를 사용한다.
    DEFAULT_SEED:     요청에 seed가 없을 때 쓸 시드. None이면 시스템 난수.
    MAX_DEGREE_LIMIT: setup에서 허용하는 최대 차수.

실행:
    $ PCS_DB_PATH=db.json python app.py
"""

import logging

from flask import Flask
from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from pcs_routes import pcs_bp, init_pcs_bp

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "DB_PATH": "db.json",
    "DEFAULT_SEED": None,
    "MAX_DEGREE_LIMIT": 32,
}


def create_app(config=None):
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    if config:
        app.config.update(config)
    app.config.from_prefixed_env("PCS")

    db_path = app.config["DB_PATH"]
    if db_path is None:
        db = TinyDB(storage=MemoryStorage)  # Memory DB
    else:
        db = TinyDB(db_path)                # Storage DB

    init_pcs_bp(db.table("pcs"))
    app.register_blueprint(pcs_bp)

    logger.info("PCS app ready (db=%s)", db_path or "memory")
    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(debug=True)
