from datetime import datetime

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

FREQUENCIES = ("daily", "weekly")


class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(120), nullable=False)
    habits = db.relationship("Habit", backref="user", lazy=True, cascade="all, delete-orphan")


class Habit(db.Model):
    __table_args__ = (
        db.Index("ix_habit_user_period", "user_id", "period_start"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    frequency = db.Column(db.String(10), nullable=False)  # "daily" or "weekly"
    progress = db.Column(db.Integer, nullable=False, default=0)
    target = db.Column(db.Integer, nullable=False)
    period_start = db.Column(db.DateTime, nullable=False)
    last_updated = db.Column(db.DateTime, nullable=False, default=datetime.now)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "frequency": self.frequency,
            "progress": self.progress,
            "target": self.target,
            "period_start": self.period_start.isoformat(),
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
