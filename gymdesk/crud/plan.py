from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from typing import Callable, List, Optional, Sequence, Type, Union
from datetime import datetime

from gymdesk.errors import DuplicateRecord, NotFound
from gymdesk.models.plan import WorkoutPlan, DietPlan
from gymdesk.models.trainee import Trainee
from gymdesk.schemas.plan import WorkoutDay, DietDay
from gymdesk.services import plan_editor
from gymdesk.services.live import live_queries, WORKOUT_PLANS, DIET_PLANS

Plan = Union[WorkoutPlan, DietPlan]

CHANNELS = {WorkoutPlan: WORKOUT_PLANS, DietPlan: DIET_PLANS}
LABELS = {WorkoutPlan: "Workout plan", DietPlan: "Diet plan"}

def _dump(days: Sequence) -> List[dict]:
    return [day.model_dump(mode="json") for day in days]

def workout_days(plan: WorkoutPlan) -> List[WorkoutDay]:
    """Load the stored day tree of a workout plan"""
    return [WorkoutDay.model_validate(day) for day in plan.days]

def diet_days(plan: DietPlan) -> List[DietDay]:
    """Load the stored day tree of a diet plan"""
    return [DietDay.model_validate(day) for day in plan.days]

def get_plan(session: Session, plan_cls: Type[Plan], plan_id: int) -> Plan:
    plan = session.get(plan_cls, plan_id)
    if not plan:
        raise NotFound(f"{LABELS[plan_cls]} not found")
    return plan

def get_plans(
    session: Session,
    plan_cls: Type[Plan],
    trainee_id: Optional[int] = None,
    is_active: Optional[bool] = True
) -> List[Plan]:
    """Get plans, optionally for one trainee and one archive partition"""
    query = select(plan_cls)
    if trainee_id is not None:
        query = query.where(plan_cls.trainee_id == trainee_id)
    if is_active is not None:
        query = query.where(plan_cls.is_active == is_active)
    query = query.order_by(plan_cls.trainee_name)
    return list(session.exec(query).all())

def get_plan_for_trainee(session: Session, plan_cls: Type[Plan], trainee_id: int) -> Optional[Plan]:
    return session.exec(select(plan_cls).where(plan_cls.trainee_id == trainee_id)).first()

def _create(session: Session, plan_cls: Type[Plan], trainee_id: int, days: Sequence) -> Plan:
    trainee = session.get(Trainee, trainee_id)
    if not trainee:
        raise NotFound("Trainee not found")
    if get_plan_for_trainee(session, plan_cls, trainee_id):
        raise DuplicateRecord(f"{LABELS[plan_cls]} already exists for {trainee.name}")

    now = datetime.now()
    plan = plan_cls(
        trainee_id=trainee_id,
        trainee_name=trainee.name,
        days=_dump(days),
        is_active=trainee.is_active,
        created_at=now,
        updated_at=now
    )
    session.add(plan)
    try:
        session.commit()
    except IntegrityError:
        # Another session created the plan between the check and the insert
        session.rollback()
        raise DuplicateRecord(f"{LABELS[plan_cls]} already exists for {trainee.name}")
    session.refresh(plan)
    live_queries.publish(CHANNELS[plan_cls], session)
    return plan

def _save_days(session: Session, plan: Plan, days: Sequence) -> Plan:
    plan.days = _dump(days)
    plan.updated_at = datetime.now()
    session.add(plan)
    session.commit()
    session.refresh(plan)
    live_queries.publish(CHANNELS[type(plan)], session)
    return plan

def create_workout_plan(session: Session, trainee_id: int, days: Sequence[WorkoutDay]) -> WorkoutPlan:
    """Create a workout plan; every day must carry at least one exercise"""
    days = plan_editor.ensure_workout_ids(days)
    plan_editor.validate_workout_for_save(days)
    return _create(session, WorkoutPlan, trainee_id, days)

def create_diet_plan(session: Session, trainee_id: int, days: Sequence[DietDay]) -> DietPlan:
    """Create a diet plan; every day must carry at least one meal"""
    days = plan_editor.ensure_diet_ids(days)
    plan_editor.validate_diet_for_save(days)
    return _create(session, DietPlan, trainee_id, days)

def replace_workout_days(session: Session, plan_id: int, days: Sequence[WorkoutDay]) -> WorkoutPlan:
    plan = get_plan(session, WorkoutPlan, plan_id)
    days = plan_editor.ensure_workout_ids(days)
    plan_editor.validate_workout_for_save(days)
    return _save_days(session, plan, days)

def replace_diet_days(session: Session, plan_id: int, days: Sequence[DietDay]) -> DietPlan:
    plan = get_plan(session, DietPlan, plan_id)
    days = plan_editor.ensure_diet_ids(days)
    plan_editor.validate_diet_for_save(days)
    return _save_days(session, plan, days)

def edit_workout_plan(
    session: Session,
    plan_id: int,
    edit: Callable[[List[WorkoutDay]], List[WorkoutDay]]
) -> WorkoutPlan:
    """Apply a tree edit to a stored workout plan and save it if still valid"""
    plan = get_plan(session, WorkoutPlan, plan_id)
    days = edit(workout_days(plan))
    plan_editor.validate_workout_for_save(days)
    return _save_days(session, plan, days)

def edit_diet_plan(
    session: Session,
    plan_id: int,
    edit: Callable[[List[DietDay]], List[DietDay]]
) -> DietPlan:
    """Apply a tree edit to a stored diet plan and save it if still valid"""
    plan = get_plan(session, DietPlan, plan_id)
    days = edit(diet_days(plan))
    plan_editor.validate_diet_for_save(days)
    return _save_days(session, plan, days)

def delete_plan(session: Session, plan_cls: Type[Plan], plan_id: int) -> None:
    plan = get_plan(session, plan_cls, plan_id)
    session.delete(plan)
    session.commit()
    live_queries.publish(CHANNELS[plan_cls], session)
