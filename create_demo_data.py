import logging

from gymdesk.crud.trainee import create_trainee
from gymdesk.crud.trainer import create_trainer
from gymdesk.crud.plan import create_workout_plan
from gymdesk.database import create_db_and_tables, get_session
from gymdesk.errors import GymDeskError
from gymdesk.models.trainee import GoalCategory, PaymentType
from gymdesk.schemas.plan import Exercise, WorkoutDay
from gymdesk.schemas.trainee import TraineeCreate
from gymdesk.schemas.trainer import TrainerCreate

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def create_demo_data(session):
    """One trainer, one trainee under special training and a two-day workout plan."""
    trainer = create_trainer(session, TrainerCreate(
        name="Ravi Kumar",
        phone_number="9876500001",
        email="ravi@example.com",
        specialization="Strength Training",
        experience=6,
        salary=25000
    ))
    trainee = create_trainee(session, TraineeCreate(
        name="Anita Sharma",
        phone_number="9876500002",
        membership_duration=3,
        admission_fee=4500,
        special_training=True,
        assigned_trainer_id=trainer.id,
        goal_category=GoalCategory.STRENGTH,
        payment_type=PaymentType.ONLINE
    ))
    plan = create_workout_plan(session, trainee.id, [
        WorkoutDay(name="Push", exercises=[
            Exercise(name="Bench Press", sets=4, reps="8-10"),
            Exercise(name="Overhead Press", sets=3, reps="10")
        ]),
        WorkoutDay(name="Pull", exercises=[
            Exercise(name="Deadlift", sets=3, reps="5", notes="Keep the bar close")
        ])
    ])
    return trainer, trainee, plan

if __name__ == "__main__":
    create_db_and_tables()
    session = next(get_session())
    try:
        trainer, trainee, plan = create_demo_data(session)
        logger.info("Created trainer %s, trainee %s and workout plan %s", trainer.unique_id, trainee.member_id, plan.id)
    except GymDeskError as e:
        logger.error("Demo data not created: %s", e.message)
