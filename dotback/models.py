from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from sqlalchemy.orm import validates
from datetime import datetime, timezone
import uuid

db = SQLAlchemy()


def _new_id():
    return uuid.uuid4().hex


def _utcnow():
    return datetime.now(timezone.utc)


class Admin(UserMixin, db.Model):
    __tablename__ = "admins"
    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    name = db.Column(db.String(120), default="Administrator")
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    @validates("email")
    def _lowercase_email(self, key, value):
        return value.strip().lower() if value else value

    def to_dict(self):
        return {"id": self.id, "email": self.email, "name": self.name}


class LevelConfig(db.Model):
    __tablename__ = "level_configs"
    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    level = db.Column(db.Integer, unique=True, nullable=False, index=True)
    background = db.Column(db.String(500), nullable=True)
    logo_url = db.Column(db.String(500), nullable=True)
    colors = db.Column(db.JSON, nullable=False, default=list)
    dot_sizes = db.Column(db.JSON, nullable=False, default=list)
    dots = db.Column(db.JSON, nullable=False, default=list)
    target_score = db.Column(db.Integer, nullable=False, default=0)
    use_default_colors = db.Column(db.String(10), nullable=False, default="default")
    use_default_dot_sizes = db.Column(db.String(10), nullable=False, default="default")

    # oldest schema, read for migration only
    background_color = db.Column(db.String(50), nullable=True)
    dot1_color = db.Column(db.String(50), nullable=True)
    dot2_color = db.Column(db.String(50), nullable=True)
    dot3_color = db.Column(db.String(50), nullable=True)
    dot4_color = db.Column(db.String(50), nullable=True)
    dot5_color = db.Column(db.String(50), nullable=True)

    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        db.CheckConstraint("level >= 1 AND level <= 10", name="ck_level_range"),
    )

    def to_document(self):
        """The stored record under its wire field names, legacy fields included."""
        doc = {
            "_id": self.id,
            "level": self.level,
            "background": self.background,
            "logoUrl": self.logo_url,
            "colors": self.colors or [],
            "dotSizes": self.dot_sizes or [],
            "dots": self.dots or [],
            "targetScore": self.target_score,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if self.background_color is not None:
            doc["backgroundColor"] = self.background_color
        for index in range(1, 6):
            value = getattr(self, f"dot{index}_color")
            if value is not None:
                doc[f"dot{index}Color"] = value
        return doc

    def apply_canonical(self, level):
        """Write a canonical level dict onto the row and drop the legacy columns."""
        self.background = level["background"]
        self.logo_url = level["logoUrl"]
        self.colors = level["colors"]
        self.dot_sizes = level["dotSizes"]
        self.dots = level["dots"]
        self.target_score = level["targetScore"]
        self.use_default_colors = level["useDefaultColors"]
        self.use_default_dot_sizes = level["useDefaultDotSizes"]
        self.background_color = None
        for index in range(1, 6):
            setattr(self, f"dot{index}_color", None)
        self.updated_at = _utcnow()
