from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field
from typing import Optional, List
from datetime import datetime

class WorkoutPlan(SQLModel, table=True):
    """Workout plan document. ``days`` holds the serialized day/exercise tree."""
    __tablename__ = "workout_plans"

    id: Optional[int] = Field(default=None, primary_key=True)
    trainee_id: int = Field(unique=True, index=True)  # one plan per trainee
    trainee_name: str
    days: List[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

class DietPlan(SQLModel, table=True):
    """Diet plan document. ``days`` holds the serialized day/meal/food tree."""
    __tablename__ = "diet_plans"

    id: Optional[int] = Field(default=None, primary_key=True)
    trainee_id: int = Field(unique=True, index=True)
    trainee_name: str
    days: List[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
