from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session
from typing import List, Optional

from gymdesk.api.errors import handle_errors
from gymdesk.crud import plan as plan_crud
from gymdesk.crud import trainee as trainee_crud
from gymdesk.database import get_session
from gymdesk.models.plan import WorkoutPlan, DietPlan
from gymdesk.schemas.plan import (
    DietDay,
    DietDraftRequest,
    DietPlanCreate,
    DietPlanReplace,
    DietPlanResponse,
    DietResizeRequest,
    ExerciseUpdate,
    MealUpdate,
    WorkoutDay,
    WorkoutDraftRequest,
    WorkoutPlanCreate,
    WorkoutPlanReplace,
    WorkoutPlanResponse,
    WorkoutResizeRequest,
)
from gymdesk.schemas.trainee import MessageLink
from gymdesk.services import plan_editor
from gymdesk.services.messaging import (
    diet_share_message,
    whatsapp_digits,
    whatsapp_link,
    workout_share_message,
)

workout_router = APIRouter(prefix="/workout-plans", tags=["workout-plans"])
diet_router = APIRouter(prefix="/diet-plans", tags=["diet-plans"])

def _share(session: Session, trainee_id: int, message: str) -> MessageLink:
    trainee = trainee_crud.get_trainee(session, trainee_id)
    if not trainee:
        raise HTTPException(status_code=404, detail="Trainee not found for this plan")
    return MessageLink(
        phone=whatsapp_digits(trainee.phone_number),
        message=message,
        url=whatsapp_link(trainee.phone_number, message)
    )

# Workout plans

@workout_router.post("/drafts", response_model=List[WorkoutDay])
async def new_workout_draft(request: WorkoutDraftRequest) -> List[WorkoutDay]:
    """Empty day skeleton for a new plan; nothing is stored"""
    return plan_editor.generate_workout_days(request.number_of_days)

@workout_router.post("/drafts/resize", response_model=List[WorkoutDay])
async def resize_workout_draft(request: WorkoutResizeRequest) -> List[WorkoutDay]:
    """Change the day count of a draft, keeping the days that remain"""
    days = plan_editor.ensure_workout_ids(request.days)
    return plan_editor.resize_workout_days(days, request.number_of_days)

@workout_router.get("/", response_model=List[WorkoutPlanResponse])
async def list_workout_plans(
    trainee_id: Optional[int] = None,
    archived: bool = Query(False, description="List plans of archived trainees"),
    session: Session = Depends(get_session)
) -> List[WorkoutPlanResponse]:
    with handle_errors("load workout plans", session):
        return plan_crud.get_plans(session, WorkoutPlan, trainee_id=trainee_id, is_active=not archived)

@workout_router.post("/", response_model=WorkoutPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_workout_plan(
    plan: WorkoutPlanCreate,
    session: Session = Depends(get_session)
) -> WorkoutPlanResponse:
    with handle_errors("save workout plan", session):
        return plan_crud.create_workout_plan(session, plan.trainee_id, plan.days)

@workout_router.get("/{plan_id}", response_model=WorkoutPlanResponse)
async def get_workout_plan(plan_id: int, session: Session = Depends(get_session)) -> WorkoutPlanResponse:
    with handle_errors("load workout plan", session):
        return plan_crud.get_plan(session, WorkoutPlan, plan_id)

@workout_router.put("/{plan_id}", response_model=WorkoutPlanResponse)
async def replace_workout_plan(
    plan_id: int,
    plan: WorkoutPlanReplace,
    session: Session = Depends(get_session)
) -> WorkoutPlanResponse:
    """Replace the day tree; ids sent back by the client are preserved"""
    with handle_errors("save workout plan", session):
        return plan_crud.replace_workout_days(session, plan_id, plan.days)

@workout_router.patch("/{plan_id}/days/{day_id}/exercises/{exercise_id}", response_model=WorkoutPlanResponse)
async def update_workout_exercise(
    plan_id: int,
    day_id: str,
    exercise_id: str,
    changes: ExerciseUpdate,
    session: Session = Depends(get_session)
) -> WorkoutPlanResponse:
    """Edit one exercise in place"""
    with handle_errors("save workout plan", session):
        return plan_crud.edit_workout_plan(
            session, plan_id, lambda days: plan_editor.update_exercise(days, day_id, exercise_id, changes)
        )

@workout_router.delete("/{plan_id}")
async def delete_workout_plan(plan_id: int, session: Session = Depends(get_session)):
    with handle_errors("delete workout plan", session):
        plan_crud.delete_plan(session, WorkoutPlan, plan_id)
    return {"message": "Workout plan deleted successfully"}

@workout_router.get("/{plan_id}/share", response_model=MessageLink)
async def share_workout_plan(plan_id: int, session: Session = Depends(get_session)) -> MessageLink:
    with handle_errors("share workout plan", session):
        plan = plan_crud.get_plan(session, WorkoutPlan, plan_id)
        message = workout_share_message(plan.trainee_name, plan_crud.workout_days(plan))
        return _share(session, plan.trainee_id, message)

# Diet plans

@diet_router.post("/drafts", response_model=List[DietDay])
async def new_diet_draft(request: DietDraftRequest) -> List[DietDay]:
    return plan_editor.generate_diet_days(request.number_of_days)

@diet_router.post("/drafts/resize", response_model=List[DietDay])
async def resize_diet_draft(request: DietResizeRequest) -> List[DietDay]:
    days = plan_editor.ensure_diet_ids(request.days)
    return plan_editor.resize_diet_days(days, request.number_of_days)

@diet_router.get("/", response_model=List[DietPlanResponse])
async def list_diet_plans(
    trainee_id: Optional[int] = None,
    archived: bool = Query(False, description="List plans of archived trainees"),
    session: Session = Depends(get_session)
) -> List[DietPlanResponse]:
    with handle_errors("load diet plans", session):
        return plan_crud.get_plans(session, DietPlan, trainee_id=trainee_id, is_active=not archived)

@diet_router.post("/", response_model=DietPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_diet_plan(
    plan: DietPlanCreate,
    session: Session = Depends(get_session)
) -> DietPlanResponse:
    with handle_errors("save diet plan", session):
        return plan_crud.create_diet_plan(session, plan.trainee_id, plan.days)

@diet_router.get("/{plan_id}", response_model=DietPlanResponse)
async def get_diet_plan(plan_id: int, session: Session = Depends(get_session)) -> DietPlanResponse:
    with handle_errors("load diet plan", session):
        return plan_crud.get_plan(session, DietPlan, plan_id)

@diet_router.put("/{plan_id}", response_model=DietPlanResponse)
async def replace_diet_plan(
    plan_id: int,
    plan: DietPlanReplace,
    session: Session = Depends(get_session)
) -> DietPlanResponse:
    with handle_errors("save diet plan", session):
        return plan_crud.replace_diet_days(session, plan_id, plan.days)

@diet_router.patch("/{plan_id}/days/{day_id}/meals/{meal_id}", response_model=DietPlanResponse)
async def update_diet_meal(
    plan_id: int,
    day_id: str,
    meal_id: str,
    changes: MealUpdate,
    session: Session = Depends(get_session)
) -> DietPlanResponse:
    """Edit one meal in place"""
    with handle_errors("save diet plan", session):
        return plan_crud.edit_diet_plan(
            session, plan_id, lambda days: plan_editor.update_meal(days, day_id, meal_id, changes)
        )

@diet_router.delete("/{plan_id}")
async def delete_diet_plan(plan_id: int, session: Session = Depends(get_session)):
    with handle_errors("delete diet plan", session):
        plan_crud.delete_plan(session, DietPlan, plan_id)
    return {"message": "Diet plan deleted successfully"}

@diet_router.get("/{plan_id}/share", response_model=MessageLink)
async def share_diet_plan(plan_id: int, session: Session = Depends(get_session)) -> MessageLink:
    with handle_errors("share diet plan", session):
        plan = plan_crud.get_plan(session, DietPlan, plan_id)
        message = diet_share_message(plan.trainee_name, plan_crud.diet_days(plan))
        return _share(session, plan.trainee_id, message)
