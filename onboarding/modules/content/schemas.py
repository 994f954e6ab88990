from pydantic import BaseModel, Field
from typing import List


class WelcomeTextResponse(BaseModel):
    welcome_text: str = Field(serialization_alias="welcomeText")


class ProcessStep(BaseModel):
    title: str
    items: List[str] = []


class ProcessOverviewResponse(BaseModel):
    steps: List[ProcessStep]
