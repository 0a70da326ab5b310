from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum

class MealType(str, Enum):
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACKS = "Snacks"

# Workout tree: day -> exercise

class Exercise(BaseModel):
    id: Optional[str] = None
    name: str = ""
    sets: int = Field(default=3, ge=1)
    reps: str = "10-12"  # "8-12" or a plain count
    notes: Optional[str] = None

    @field_validator("reps", mode="before")
    @classmethod
    def reps_as_text(cls, value):
        if isinstance(value, int):
            return str(value)
        return value

class WorkoutDay(BaseModel):
    id: Optional[str] = None
    name: str
    exercises: List[Exercise] = Field(default_factory=list)
    notes: Optional[str] = None

# Diet tree: day -> meal -> food item

class FoodItem(BaseModel):
    id: Optional[str] = None
    name: str = ""
    quantity: Optional[str] = None

class Meal(BaseModel):
    id: Optional[str] = None
    type: MealType = MealType.BREAKFAST
    name: str = ""
    food_items: List[FoodItem] = Field(default_factory=list)
    notes: Optional[str] = None

class DietDay(BaseModel):
    id: Optional[str] = None
    day_number: int = Field(ge=1)
    day_name: str
    meals: List[Meal] = Field(default_factory=list)

# Partial edits of a single node

class ExerciseUpdate(BaseModel):
    name: Optional[str] = None
    sets: Optional[int] = Field(default=None, ge=1)
    reps: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("reps", mode="before")
    @classmethod
    def reps_as_text(cls, value):
        if isinstance(value, int):
            return str(value)
        return value

class MealUpdate(BaseModel):
    type: Optional[MealType] = None
    name: Optional[str] = None
    notes: Optional[str] = None

# Drafts (not persisted)

class WorkoutDraftRequest(BaseModel):
    number_of_days: int = Field(default=3, ge=1, le=7)

class WorkoutResizeRequest(BaseModel):
    days: List[WorkoutDay]
    number_of_days: int = Field(ge=1, le=7)

class DietDraftRequest(BaseModel):
    number_of_days: int = Field(default=3, ge=1, le=7)

class DietResizeRequest(BaseModel):
    days: List[DietDay]
    number_of_days: int = Field(ge=1, le=7)

# Plans

class WorkoutPlanCreate(BaseModel):
    trainee_id: int
    days: List[WorkoutDay]

class WorkoutPlanReplace(BaseModel):
    days: List[WorkoutDay]

class WorkoutPlanResponse(BaseModel):
    id: int
    trainee_id: int
    trainee_name: str
    days: List[WorkoutDay]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class DietPlanCreate(BaseModel):
    trainee_id: int
    days: List[DietDay]

class DietPlanReplace(BaseModel):
    days: List[DietDay]

class DietPlanResponse(BaseModel):
    id: int
    trainee_id: int
    trainee_name: str
    days: List[DietDay]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
