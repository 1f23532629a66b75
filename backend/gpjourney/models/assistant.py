from pydantic import BaseModel, Field


class DailySuggestions(BaseModel):
    food: str
    exercise: str


class CorrelationResponse(BaseModel):
    analysis: str


class ReminderRequest(BaseModel):
    medication: str = Field(min_length=1, description="What the user just took")
    action: str = Field(min_length=1, description="What to do when the reminder fires")
    minutes: int = Field(default=30, gt=0, description="Delay before the reminder")


class Reminder(BaseModel):
    action: str
    minutes: float = Field(gt=0)
