import logging

from flask import request, jsonify
from sqlalchemy.exc import SQLAlchemyError

from . import app, store, tracker
from .auth import token_required
from .models import FREQUENCIES

logger = logging.getLogger(__name__)

# Integer columns are 32-bit signed on most backends
INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def _is_int(value):
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return INT_MIN <= value <= INT_MAX


def _normalize_frequency(frequency):
    if not isinstance(frequency, str) or frequency.lower() not in FREQUENCIES:
        return None
    return frequency.lower()


def _owned_habit(user, id):
    """Return (habit, None) or (None, error response) for habit ``id``."""
    habit = store.find_habit(id)
    if habit is None:
        logger.error(f"Habit {id} not found")
        return None, (jsonify({"message": "Habit not found"}), 404)
    if habit.user_id != user.id:
        logger.error(f"Unauthorized access to habit {id} by user {user.id}")
        return None, (jsonify({"message": "Unauthorized"}), 403)
    return habit, None


@app.route("/api/habits", methods=["GET"])
@token_required
def get_habits(user):
    now = tracker.local_now()
    try:
        habits = [
            tracker.reconcile_period(habit, now, store.save_habit)
            for habit in store.find_habits(user.id)
        ]
    except SQLAlchemyError as e:
        logger.error(f"Database error fetching habits: {str(e)}")
        return jsonify({"message": "Failed to fetch habits"}), 500
    logger.debug(f"Fetched {len(habits)} habits for user {user.username}")
    return jsonify({"habits": [habit.to_dict() for habit in habits]}), 200


@app.route("/api/habits", methods=["POST"])
@token_required
def create_habit(user):
    data = _json_body()
    if data is None:
        return jsonify({"message": "Request body must be a JSON object"}), 400
    logger.debug(f"Create habit payload: {data}")
    name = data.get("name")
    frequency = data.get("frequency")
    target = data.get("target")
    if not name or not frequency:
        logger.error("Missing name or frequency")
        return jsonify({"message": "Name and frequency required"}), 400
    if not isinstance(name, str):
        return jsonify({"message": "Name must be a string"}), 400
    frequency = _normalize_frequency(frequency)
    if frequency is None:
        logger.error(f"Invalid frequency: {data.get('frequency')}")
        return jsonify({"message": "Frequency must be 'daily' or 'weekly'"}), 400
    if target is None:
        target = tracker.default_target(frequency)
    elif not _is_int(target):
        return jsonify({"message": "Target must be an integer"}), 400

    now = tracker.local_now()
    try:
        habit = store.create_habit(
            user_id=user.id,
            name=name,
            frequency=frequency,
            target=max(1, target),
            progress=0,
            period_start=tracker.get_period_start(frequency, now),
            last_updated=now,
            created_at=now
        )
    except SQLAlchemyError:
        return jsonify({"message": "Failed to create habit"}), 500
    logger.info(f"Habit created: {name} for user {user.username}")
    return jsonify({"message": "Habit created", "habit": habit.to_dict()}), 201


@app.route("/api/habits/<int:id>", methods=["PUT"])
@token_required
def update_habit(user, id):
    habit, error = _owned_habit(user, id)
    if error:
        return error
    data = _json_body()
    if data is None:
        return jsonify({"message": "Request body must be a JSON object"}), 400
    logger.debug(f"Update habit {id} payload: {data}")

    progress = data.get("progress")
    target = data.get("target")
    name = data.get("name")
    frequency = data.get("frequency")
    if progress is not None and not _is_int(progress):
        return jsonify({"message": "Progress must be an integer"}), 400
    if target is not None and not _is_int(target):
        return jsonify({"message": "Target must be an integer"}), 400
    if name is not None and not isinstance(name, str):
        return jsonify({"message": "Name must be a string"}), 400
    if frequency:
        frequency = _normalize_frequency(frequency)
        if frequency is None:
            logger.error(f"Invalid frequency: {data.get('frequency')}")
            return jsonify({"message": "Frequency must be 'daily' or 'weekly'"}), 400

    now = tracker.local_now()
    try:
        tracker.reconcile_period(habit, now, store.save_habit)
        if progress is not None:
            tracker.set_progress(habit, progress)
        if name:
            habit.name = name
        if frequency:
            tracker.change_frequency(habit, frequency, now)
        if target is not None:
            tracker.set_target(habit, target)
        tracker.touch(habit, now)
        store.save_habit(habit)
    except SQLAlchemyError:
        return jsonify({"message": "Failed to update habit"}), 500
    logger.info(f"Habit {id} updated for user {user.username}")
    return jsonify({"message": "Habit updated", "habit": habit.to_dict()}), 200


@app.route("/api/habits/<int:id>/increment", methods=["POST"])
@token_required
def increment_habit(user, id):
    habit, error = _owned_habit(user, id)
    if error:
        return error
    now = tracker.local_now()
    try:
        tracker.reconcile_period(habit, now, store.save_habit)
        tracker.increment_progress(habit)
        tracker.touch(habit, now)
        store.save_habit(habit)
    except SQLAlchemyError:
        return jsonify({"message": "Failed to increment habit"}), 500
    logger.info(f"Habit {id} incremented to {habit.progress}/{habit.target} for user {user.username}")
    return jsonify({"message": "Habit incremented", "habit": habit.to_dict()}), 200


@app.route("/api/habits/<int:id>", methods=["DELETE"])
@token_required
def delete_habit(user, id):
    habit, error = _owned_habit(user, id)
    if error:
        return error
    try:
        logger.info(f"Deleting habit {id} for user {user.id}")
        removed = store.delete_habit(habit.id)
    except SQLAlchemyError:
        return jsonify({"message": "Failed to delete habit"}), 500
    if not removed:
        return jsonify({"message": "Habit not found"}), 404
    logger.info(f"Habit {id} deleted successfully by user {user.id}")
    return jsonify({"message": "Habit deleted"}), 200
