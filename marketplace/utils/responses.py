from flask import jsonify
from marketplace.db import db


def ok(data=None, code=200):  return jsonify(data if data is not None else {}), code
def err(code, detail=None, status=400):
    return jsonify({"error": code, "detail": detail or code}), status


def commit_or_rollback(session=None):
    session = session or db.session
    try:
        session.commit()
    except Exception:
        session.rollback()
        raise
