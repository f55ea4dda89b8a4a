"""
PCS Flask Blueprint: 레이블 다항식 커밋먼트 엔드포인트
=========================================================

흐름: setup → trim → polynomials → commit → open → check
모든 엔드포인트는 JSON을 주고받으며 상태는 TinyDB에 저장된다.
"""

import logging
import random
import secrets

from flask import Blueprint, current_app, jsonify, request
from tinydb import Query

from pcs.errors import PCSError
from pcs.field import FR
from pcs.marlin_pc import MarlinKZG10

from pcs_serializers import (
    serialize_fr, deserialize_fr,
    serialize_labeled_poly, deserialize_labeled_poly,
    serialize_params, deserialize_params,
    serialize_labeled_commitment, deserialize_labeled_commitment,
    serialize_randomness, deserialize_randomness,
    serialize_proof, deserialize_proof,
    g1_short,
)

logger = logging.getLogger(__name__)

pcs_bp = Blueprint('pcs', __name__, url_prefix='/pcs')

DATA = Query()

# DB는 app.py에서 주입
DB = None


def init_pcs_bp(db):
    """app.py에서 DB를 주입받는다."""
    global DB
    DB = db


# ─── DB 헬퍼 ───

def db_get(key):
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def db_remove_prefix(prefix):
    DB.remove(DATA.type.test(lambda t: t.startswith(prefix)))


# ─── 요청 헬퍼 ───

class PrerequisiteMissing(Exception):
    """이전 단계가 아직 실행되지 않았다."""


class InvalidRequest(Exception):
    """요청 본문의 값이 올바르지 않다."""


def _json():
    return request.get_json(silent=True) or {}


def _rng(payload):
    seed = payload.get("seed", current_app.config.get("DEFAULT_SEED"))
    if seed is None:
        return secrets.SystemRandom()
    return random.Random(seed)


def _optional_int(payload, key):
    value = payload.get(key)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidRequest(f"{key}는 정수여야 합니다: {value!r}")


def _require(key, step):
    data = db_get(key)
    if data is None:
        raise PrerequisiteMissing(f"'{step}' 단계를 먼저 실행해야 합니다")
    return data


def _load_keys():
    params = deserialize_params(_require("pcs.setup.params", "setup"))
    trim_info = _require("pcs.trim.info", "trim")
    return MarlinKZG10.trim(
        params, trim_info["supported_degree"], trim_info["degree_bounds"]
    )


def _load_polynomials():
    return [deserialize_labeled_poly(p) for p in db_get("pcs.polynomials") or []]


@pcs_bp.errorhandler(PCSError)
def handle_pcs_error(e):
    logger.info("rejected request: %s", e)
    return jsonify({"error": str(e), "kind": type(e).__name__}), 400


@pcs_bp.errorhandler(PrerequisiteMissing)
def handle_prerequisite(e):
    return jsonify({"error": str(e)}), 409


@pcs_bp.errorhandler(InvalidRequest)
def handle_invalid_request(e):
    return jsonify({"error": str(e)}), 400


# ──────────────────────────────────────────────────────────────
# Setup / Trim
# ──────────────────────────────────────────────────────────────

@pcs_bp.route("/setup", methods=["POST"])
def setup():
    """범용 파라미터를 생성한다."""
    payload = _json()
    max_degree = int(payload.get("max_degree", 8))
    limit = current_app.config["MAX_DEGREE_LIMIT"]
    if max_degree > limit:
        return jsonify({"error": f"max_degree는 {limit} 이하여야 합니다"}), 400

    params = MarlinKZG10.setup(max_degree, _rng(payload))
    db_remove_prefix("pcs.")
    db_set("pcs.setup.params", serialize_params(params))
    return jsonify({"max_degree": params.max_degree})


@pcs_bp.route("/trim", methods=["POST"])
def trim():
    """범용 파라미터를 지원 차수로 트리밍한다."""
    payload = _json()
    params = deserialize_params(_require("pcs.setup.params", "setup"))
    supported_degree = int(payload.get("supported_degree", params.max_degree))
    degree_bounds = [int(d) for d in payload.get("degree_bounds") or []]

    ck, vk = MarlinKZG10.trim(params, supported_degree, degree_bounds)
    db_set("pcs.trim.info", {
        "supported_degree": supported_degree,
        "degree_bounds": ck.enforced_degree_bounds,
    })
    return jsonify({
        "max_degree": ck.max_degree,
        "supported_degree": ck.supported_degree,
        "enforced_degree_bounds": ck.enforced_degree_bounds,
        "shift_powers": {str(d): g1_short(p) for d, p in vk.degree_bounds_and_shift_powers.items()},
    })


# ──────────────────────────────────────────────────────────────
# Polynomials
# ──────────────────────────────────────────────────────────────

@pcs_bp.route("/polynomials", methods=["GET"])
def list_polynomials():
    return jsonify({"polynomials": db_get("pcs.polynomials") or []})


@pcs_bp.route("/polynomials", methods=["POST"])
def add_polynomial():
    """레이블 다항식을 추가한다. 검증은 commit 단계에서 이루어진다."""
    payload = _json()
    if "label" not in payload or "coeffs" not in payload:
        return jsonify({"error": "label과 coeffs가 필요합니다"}), 400

    try:
        coeffs = [str(int(c)) for c in payload["coeffs"]]
    except (TypeError, ValueError):
        raise InvalidRequest("coeffs는 정수 리스트여야 합니다")

    labeled = deserialize_labeled_poly({
        "label": str(payload["label"]),
        "coeffs": coeffs,
        "degree_bound": _optional_int(payload, "degree_bound"),
        "hiding_bound": _optional_int(payload, "hiding_bound"),
    })
    polys = db_get("pcs.polynomials") or []
    polys.append(serialize_labeled_poly(labeled))
    db_set("pcs.polynomials", polys)
    return jsonify({
        "polynomial": serialize_labeled_poly(labeled),
        "degree": labeled.degree,
        "is_hiding": labeled.is_hiding(),
    }), 201


# ──────────────────────────────────────────────────────────────
# Commit / Open / Check
# ──────────────────────────────────────────────────────────────

@pcs_bp.route("/commit", methods=["POST"])
def commit():
    """저장된 모든 레이블 다항식을 커밋한다."""
    payload = _json()
    ck, _ = _load_keys()
    polys = _load_polynomials()
    if not polys:
        raise PrerequisiteMissing("커밋할 다항식이 없습니다")

    commitments, randomness = MarlinKZG10.commit(ck, polys, _rng(payload))
    db_set("pcs.commit.commitments", [serialize_labeled_commitment(c) for c in commitments])
    db_set("pcs.commit.randomness", [serialize_randomness(r) for r in randomness])
    return jsonify({
        "commitments": [
            {
                "label": c.label,
                "degree_bound": c.degree_bound,
                "size_in_bytes": c.commitment.size_in_bytes(),
                "bytes": c.to_bytes().hex(),
            }
            for c in commitments
        ]
    })


@pcs_bp.route("/open", methods=["POST"])
def open_():
    """모든 다항식을 한 점에서 여는 배치 증명을 만든다."""
    payload = _json()
    if "point" not in payload:
        return jsonify({"error": "point가 필요합니다"}), 400
    point = FR(int(payload["point"]))

    ck, _ = _load_keys()
    polys = _load_polynomials()
    commitments = [
        deserialize_labeled_commitment(c)
        for c in _require("pcs.commit.commitments", "commit")
    ]
    randomness = [deserialize_randomness(r) for r in db_get("pcs.commit.randomness")]

    challenge = MarlinKZG10.opening_challenge(commitments, point)
    proof = MarlinKZG10.open(ck, polys, point, challenge, randomness)
    values = {p.label: serialize_fr(p.evaluate(point)) for p in polys}

    db_set("pcs.open.data", {
        "point": serialize_fr(point),
        "values": values,
        "proof": serialize_proof(proof),
    })
    return jsonify({
        "point": serialize_fr(point),
        "values": values,
        "challenge": serialize_fr(challenge),
        "proof": serialize_proof(proof),
        "size_in_bytes": proof.size_in_bytes(),
    })


@pcs_bp.route("/check", methods=["POST"])
def check():
    """저장된 증명을 검증한다. ``values``를 넘기면 저장된 평가값을 덮어쓴다."""
    payload = _json()
    _, vk = _load_keys()
    commitments = [
        deserialize_labeled_commitment(c)
        for c in _require("pcs.commit.commitments", "commit")
    ]
    open_data = _require("pcs.open.data", "open")

    point = deserialize_fr(open_data["point"])
    values = {label: deserialize_fr(v) for label, v in open_data["values"].items()}
    for label, v in (payload.get("values") or {}).items():
        values[label] = FR(int(v))
    proof = deserialize_proof(open_data["proof"])

    challenge = MarlinKZG10.opening_challenge(commitments, point)
    result = MarlinKZG10.check(vk, commitments, point, values, proof, challenge)
    return jsonify({"result": result})


# ──────────────────────────────────────────────────────────────
# State
# ──────────────────────────────────────────────────────────────

@pcs_bp.route("/state", methods=["GET"])
def state():
    params = db_get("pcs.setup.params")
    return jsonify({
        "max_degree": len(params["powers_of_g"]) - 1 if params else None,
        "trim": db_get("pcs.trim.info"),
        "polynomials": [p["label"] for p in db_get("pcs.polynomials") or []],
        "commitments": [c["label"] for c in db_get("pcs.commit.commitments") or []],
        "opened_at": (db_get("pcs.open.data") or {}).get("point"),
    })


@pcs_bp.route("/clear", methods=["POST"])
def clear():
    """모든 PCS 데이터를 지운다."""
    db_remove_prefix("pcs.")
    return jsonify({"cleared": True})
