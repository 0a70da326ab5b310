from .trainee import Trainee, GoalCategory, PaymentType, MembershipStatus, MEMBERSHIP_DURATIONS
from .trainer import Trainer
from .attendance import AttendanceRecord, TrainerAttendanceRecord
from .plan import WorkoutPlan, DietPlan

__all__ = [
    'Trainee',
    'GoalCategory',
    'PaymentType',
    'MembershipStatus',
    'MEMBERSHIP_DURATIONS',
    'Trainer',
    'AttendanceRecord',
    'TrainerAttendanceRecord',
    'WorkoutPlan',
    'DietPlan'
]
