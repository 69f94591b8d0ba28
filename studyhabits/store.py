import logging

from sqlalchemy.exc import SQLAlchemyError

from .models import db, Habit

logger = logging.getLogger(__name__)


def find_habits(owner_id):
    return Habit.query.filter_by(user_id=owner_id).order_by(Habit.created_at.desc(), Habit.id.desc()).all()


def find_habit(habit_id):
    return db.session.get(Habit, habit_id)


def create_habit(**fields):
    habit = Habit(**fields)
    db.session.add(habit)
    _commit("create habit")
    return habit


def save_habit(habit):
    db.session.add(habit)
    _commit(f"save habit {habit.id}")


def delete_habit(habit_id):
    removed = Habit.query.filter_by(id=habit_id).delete()
    _commit(f"delete habit {habit_id}")
    return removed > 0


def _commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Database error during {action}: {str(e)}")
        db.session.rollback()
        raise
    except Exception:
        db.session.rollback()
        raise
