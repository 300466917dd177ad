# marketplace/init_db.py
import argparse
import logging

from sqlalchemy import or_
from werkzeug.security import generate_password_hash

from marketplace.models import Role, User
from marketplace.utils.responses import commit_or_rollback

logger = logging.getLogger(__name__)


def ensure_admin(session, name, email, password):
    """Create the bootstrap admin unless an admin or the admin email already exists."""
    email = email.strip().lower()
    existing = (
        session.query(User)
        .filter(or_(User.role == Role.admin, User.email == email))
        .order_by(User.id.asc())
        .first()
    )
    if existing:
        return existing

    admin = User(
        name=name,
        email=email,
        password=generate_password_hash(password),
        role=Role.admin,
        location="HQ",
        phone="0000000000",
    )
    session.add(admin)
    commit_or_rollback(session)
    logger.info("default admin created: id=%s email=%s", admin.id, admin.email)
    return admin


def main(argv=None):
    from marketplace.app import create_app
    from marketplace.config import Config
    from marketplace.db import db

    parser = argparse.ArgumentParser(description="Create tables and the bootstrap admin")
    parser.add_argument("--name", default=Config.ADMIN_NAME)
    parser.add_argument("--email", default=Config.ADMIN_EMAIL)
    parser.add_argument("--password", default=Config.ADMIN_PASSWORD)
    args = parser.parse_args(argv)

    app = create_app({"BOOTSTRAP_ADMIN": False})
    with app.app_context():
        db.create_all()
        admin = ensure_admin(db.session, args.name, args.email, args.password)
        print(f"[init_db] {app.config['SQLALCHEMY_DATABASE_URI']} admin id={admin.id} email={admin.email}")


if __name__ == "__main__":
    main()
