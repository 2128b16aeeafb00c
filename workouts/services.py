import uuid

from .models import Workout


def workout_exists(workout_id) -> bool:
    try:
        workout_id = uuid.UUID(str(workout_id))
    except (TypeError, ValueError):
        return False
    return Workout.objects.filter(id=workout_id).exists()
