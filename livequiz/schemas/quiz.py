from typing import List, Literal, Optional

from pydantic import Field, model_validator

from .base import CamelModel

Category = Literal[
    "Science",
    "History",
    "Geography",
    "Pop Culture",
    "Sports",
    "Technology",
    "General Knowledge",
    "Other",
]
Difficulty = Literal["easy", "medium", "hard"]


class QuestionIn(CamelModel):
    question: str = Field(min_length=1)
    options: List[str] = Field(min_length=2, max_length=4)
    correct_answer: int = Field(ge=0)
    time_limit: int = Field(default=30, gt=0, le=600)
    points: int = Field(default=100, gt=0)

    @model_validator(mode="after")
    def _correct_answer_in_range(self):
        if self.correct_answer >= len(self.options):
            raise ValueError("correctAnswer must be an index into options")
        if any(not opt for opt in self.options):
            raise ValueError("options must not be empty strings")
        return self


class CreateQuizRequest(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    category: Category
    difficulty: Difficulty
    questions: List[QuestionIn] = Field(min_length=1)


class CreateAIQuizRequest(CamelModel):
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    category: Category
    difficulty: Difficulty
    number_of_questions: int = Field(default=5, ge=1, le=20)
