"""
Editing rules for workout and diet plan trees.

Every node (day, exercise, meal, food item) gets a generated id once, when it
is created. Edits address nodes by id and rebuild only the path from the plan
root to the edited node; siblings keep their order and their ids. Functions
here never mutate their input lists.
"""
import secrets
import time
from typing import Callable, List, Sequence, TypeVar

from pydantic import ValidationError

from gymdesk.errors import NotFound, ValidationFailed
from gymdesk.schemas.plan import (
    DietDay,
    Exercise,
    ExerciseUpdate,
    FoodItem,
    Meal,
    MealUpdate,
    WorkoutDay,
)

Node = TypeVar("Node")

DEFAULT_WORKOUT_DAY_NAMES = ["Push", "Pull", "Legs", "Upper", "Lower", "Core", "Full Body"]


def new_node_id(kind: str) -> str:
    return f"{kind}-{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def replace_by_id(nodes: Sequence[Node], node_id: str, change: Callable[[Node], Node], kind: str) -> List[Node]:
    """Return a copy of ``nodes`` with the node ``node_id`` replaced by ``change(node)``."""
    found = False
    result = []
    for node in nodes:
        if node.id == node_id:
            node = change(node)
            found = True
        result.append(node)
    if not found:
        raise NotFound(f"{kind} {node_id} not found")
    return result


def remove_by_id(nodes: Sequence[Node], node_id: str, kind: str) -> List[Node]:
    result = [node for node in nodes if node.id != node_id]
    if len(result) == len(nodes):
        raise NotFound(f"{kind} {node_id} not found")
    return result


def revalidate(node: Node, fields: dict) -> Node:
    """Apply a partial edit to ``node`` and validate the result as a whole node."""
    try:
        return type(node).model_validate({**node.model_dump(), **fields})
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ValidationFailed(f"Invalid {type(node).__name__.lower()}: {problems}")


# Id assignment

def ensure_workout_ids(days: Sequence[WorkoutDay]) -> List[WorkoutDay]:
    """Fill in missing ids; ids already present are kept as they are."""
    return [
        day.model_copy(update={
            "id": day.id or new_node_id("day"),
            "exercises": [e if e.id else e.model_copy(update={"id": new_node_id("exercise")}) for e in day.exercises],
        })
        for day in days
    ]


def ensure_diet_ids(days: Sequence[DietDay]) -> List[DietDay]:
    result = []
    for day in days:
        meals = []
        for meal in day.meals:
            items = [f if f.id else f.model_copy(update={"id": new_node_id("food")}) for f in meal.food_items]
            meals.append(meal.model_copy(update={"id": meal.id or new_node_id("meal"), "food_items": items}))
        result.append(day.model_copy(update={"id": day.id or new_node_id("day"), "meals": meals}))
    return result


# Day generation and resizing

def new_workout_day(index: int) -> WorkoutDay:
    name = DEFAULT_WORKOUT_DAY_NAMES[index] if index < len(DEFAULT_WORKOUT_DAY_NAMES) else f"Day {index + 1}"
    return WorkoutDay(id=new_node_id("day"), name=name, exercises=[], notes="")


def new_diet_day(index: int) -> DietDay:
    return DietDay(id=new_node_id("day"), day_number=index + 1, day_name=f"Day {index + 1}", meals=[])


def generate_workout_days(number_of_days: int) -> List[WorkoutDay]:
    return [new_workout_day(i) for i in range(number_of_days)]


def generate_diet_days(number_of_days: int) -> List[DietDay]:
    return [new_diet_day(i) for i in range(number_of_days)]


def resize_days(days: Sequence[Node], number_of_days: int, make_day: Callable[[int], Node]) -> List[Node]:
    """Keep days up to the new count verbatim, append fresh days, drop the rest."""
    if number_of_days < 1:
        raise ValidationFailed("A plan needs at least one day")
    kept = list(days[:number_of_days])
    return kept + [make_day(i) for i in range(len(kept), number_of_days)]


def resize_workout_days(days: Sequence[WorkoutDay], number_of_days: int) -> List[WorkoutDay]:
    return resize_days(days, number_of_days, new_workout_day)


def resize_diet_days(days: Sequence[DietDay], number_of_days: int) -> List[DietDay]:
    return resize_days(days, number_of_days, new_diet_day)


# Workout edits

def rename_workout_day(days: Sequence[WorkoutDay], day_id: str, name: str) -> List[WorkoutDay]:
    return replace_by_id(days, day_id, lambda d: d.model_copy(update={"name": name}), "Day")


def set_workout_day_notes(days: Sequence[WorkoutDay], day_id: str, notes: str) -> List[WorkoutDay]:
    return replace_by_id(days, day_id, lambda d: d.model_copy(update={"notes": notes}), "Day")


def add_exercise(days: Sequence[WorkoutDay], day_id: str, exercise: Exercise = None) -> List[WorkoutDay]:
    exercise = (exercise or Exercise()).model_copy(update={"id": new_node_id("exercise")})
    return replace_by_id(
        days, day_id, lambda d: d.model_copy(update={"exercises": d.exercises + [exercise]}), "Day"
    )


def update_exercise(days: Sequence[WorkoutDay], day_id: str, exercise_id: str, changes: ExerciseUpdate) -> List[WorkoutDay]:
    fields = changes.model_dump(exclude_unset=True)

    def edit_day(day: WorkoutDay) -> WorkoutDay:
        exercises = replace_by_id(
            day.exercises, exercise_id, lambda e: revalidate(e, fields), "Exercise"
        )
        return day.model_copy(update={"exercises": exercises})

    return replace_by_id(days, day_id, edit_day, "Day")


def remove_exercise(days: Sequence[WorkoutDay], day_id: str, exercise_id: str) -> List[WorkoutDay]:
    return replace_by_id(
        days,
        day_id,
        lambda d: d.model_copy(update={"exercises": remove_by_id(d.exercises, exercise_id, "Exercise")}),
        "Day",
    )


# Diet edits

def rename_diet_day(days: Sequence[DietDay], day_id: str, day_name: str) -> List[DietDay]:
    return replace_by_id(days, day_id, lambda d: d.model_copy(update={"day_name": day_name}), "Day")


def add_meal(days: Sequence[DietDay], day_id: str, meal: Meal = None) -> List[DietDay]:
    meal = (meal or Meal()).model_copy(update={"id": new_node_id("meal")})
    return replace_by_id(days, day_id, lambda d: d.model_copy(update={"meals": d.meals + [meal]}), "Day")


def _edit_meal(days: Sequence[DietDay], day_id: str, meal_id: str, change: Callable[[Meal], Meal]) -> List[DietDay]:
    return replace_by_id(
        days,
        day_id,
        lambda d: d.model_copy(update={"meals": replace_by_id(d.meals, meal_id, change, "Meal")}),
        "Day",
    )


def update_meal(days: Sequence[DietDay], day_id: str, meal_id: str, changes: MealUpdate) -> List[DietDay]:
    fields = changes.model_dump(exclude_unset=True)
    return _edit_meal(days, day_id, meal_id, lambda m: revalidate(m, fields))


def remove_meal(days: Sequence[DietDay], day_id: str, meal_id: str) -> List[DietDay]:
    return replace_by_id(
        days,
        day_id,
        lambda d: d.model_copy(update={"meals": remove_by_id(d.meals, meal_id, "Meal")}),
        "Day",
    )


def add_food_item(days: Sequence[DietDay], day_id: str, meal_id: str, item: FoodItem = None) -> List[DietDay]:
    item = (item or FoodItem()).model_copy(update={"id": new_node_id("food")})
    return _edit_meal(days, day_id, meal_id, lambda m: m.model_copy(update={"food_items": m.food_items + [item]}))


def update_food_item(days: Sequence[DietDay], day_id: str, meal_id: str, food_id: str, **fields) -> List[DietDay]:
    def edit_meal(meal: Meal) -> Meal:
        items = replace_by_id(meal.food_items, food_id, lambda f: revalidate(f, fields), "Food item")
        return meal.model_copy(update={"food_items": items})

    return _edit_meal(days, day_id, meal_id, edit_meal)


def remove_food_item(days: Sequence[DietDay], day_id: str, meal_id: str, food_id: str) -> List[DietDay]:
    return _edit_meal(
        days,
        day_id,
        meal_id,
        lambda m: m.model_copy(update={"food_items": remove_by_id(m.food_items, food_id, "Food item")}),
    )


# Save rules

def validate_workout_for_save(days: Sequence[WorkoutDay]) -> None:
    if not days:
        raise ValidationFailed("A workout plan needs at least one day")
    empty = [day.name for day in days if not day.exercises]
    if empty:
        raise ValidationFailed(f"Every day needs at least one exercise: {', '.join(empty)}")


def validate_diet_for_save(days: Sequence[DietDay]) -> None:
    if not days:
        raise ValidationFailed("A diet plan needs at least one day")
    empty = [day.day_name for day in days if not day.meals]
    if empty:
        raise ValidationFailed(f"Every day needs at least one meal: {', '.join(empty)}")
