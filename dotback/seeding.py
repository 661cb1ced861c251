"""Insert-if-absent bootstrap of the administrator and the ten default levels."""
from flask import current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash

from .levels import MAX_LEVEL, MIN_LEVEL, build_level
from .models import Admin, LevelConfig, db

DEFAULT_BACKGROUND = "#f4f9ff"


def default_level_payload():
    return {"background": DEFAULT_BACKGROUND, "logoUrl": "", "targetScore": 0}


def seed_admin():
    """Create the configured admin when no administrator exists yet."""
    if Admin.query.first() is not None:
        return None

    config = current_app.config
    email = config["ADMIN_EMAIL"].strip().lower()

    admin = Admin(
        email=email,
        password_hash=generate_password_hash(config["ADMIN_PASSWORD"]),
        name=config["ADMIN_NAME"],
    )
    db.session.add(admin)
    try:
        db.session.commit()
    except IntegrityError:
        # another process won the race; the unique email keeps one row
        db.session.rollback()
        return None
    current_app.logger.info("Seeded admin account %s", email)
    return admin


def seed_levels():
    """Create each missing default level; existing levels are never touched."""
    created = []
    for number in range(MIN_LEVEL, MAX_LEVEL + 1):
        if LevelConfig.query.filter_by(level=number).first() is not None:
            continue
        row = LevelConfig(level=number)
        row.apply_canonical(build_level(default_level_payload()))
        db.session.add(row)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            continue
        created.append(number)
    if created:
        current_app.logger.info("Seeded default levels %s", created)
    return created


def seed_data(include_levels=False):
    db.create_all()
    admin = seed_admin()
    levels = seed_levels() if include_levels else []
    return admin, levels
