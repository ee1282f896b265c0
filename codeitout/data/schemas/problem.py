import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import UUID4, Field as PydanticField, field_validator
from sqlalchemy import JSON, Column, Enum, String, Text
from sqlmodel import Field

from codeitout.data.schemas.base import APIModel, BaseModel
from codeitout.data.schemas.enums import Difficulty


class Problem(BaseModel, table=True):
    """
    Represents a validated coding problem.
    Only problems whose reference solutions passed every test case
    are stored here.
    """

    __tablename__ = "problems"

    title: str = Field(sa_column=Column(String(255), nullable=False))
    description: str = Field(sa_column=Column(Text, nullable=False))
    difficulty: Difficulty = Field(sa_column=Column(Enum(Difficulty), nullable=False))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    examples: List[Dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    constraints: str = Field(default="", sa_column=Column(Text, nullable=False))
    test_cases: List[Dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    code_snippets: Dict[str, str] = Field(
        default_factory=dict, sa_column=Column(JSON, nullable=False)
    )
    reference_solutions: List[Dict[str, str]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)


class ProblemExample(APIModel):
    input: str
    output: str
    explanation: Optional[str] = None


class TestCase(APIModel):
    """Schema for a test case"""

    __test__ = False

    input: str
    output: str


class ReferenceSolution(APIModel):
    language: str = PydanticField(..., min_length=1)
    source_code: str


class ProblemCreate(APIModel):
    title: str = PydanticField(..., min_length=1, max_length=255)
    description: str
    difficulty: Difficulty
    tags: List[str] = []
    examples: List[ProblemExample] = []
    constraints: str = ""
    test_cases: List[TestCase] = PydanticField(..., min_length=1)
    code_snippets: Dict[str, str] = {}
    reference_solutions: List[ReferenceSolution] = PydanticField(..., min_length=1)

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags: List[str]) -> List[str]:
        return list(dict.fromkeys(tags))

    @field_validator("reference_solutions", mode="before")
    @classmethod
    def normalize_reference_solutions(cls, value: Any) -> Any:
        # {"python": "..."} keeps its key order when turned into pairs
        if isinstance(value, dict):
            return [
                {"language": language, "source_code": source}
                for language, source in value.items()
            ]
        return value

    @field_validator("reference_solutions")
    @classmethod
    def unique_languages(
        cls, solutions: List[ReferenceSolution]
    ) -> List[ReferenceSolution]:
        seen = set()
        for solution in solutions:
            key = solution.language.strip().upper()
            if key in seen:
                raise ValueError(
                    f"duplicate reference solution for language: {solution.language}"
                )
            seen.add(key)
        return solutions

    def to_record(self) -> Dict[str, Any]:
        """Column values for the problems table."""
        return {
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty,
            "tags": list(self.tags),
            "examples": [example.model_dump() for example in self.examples],
            "constraints": self.constraints,
            "test_cases": [test_case.model_dump() for test_case in self.test_cases],
            "code_snippets": dict(self.code_snippets),
            "reference_solutions": [
                solution.model_dump() for solution in self.reference_solutions
            ],
        }


class ProblemResponse(APIModel):
    id: UUID4
    title: str
    description: str
    difficulty: Difficulty
    tags: List[str]
    examples: List[ProblemExample]
    constraints: str
    test_cases: List[TestCase]
    code_snippets: Dict[str, str]
    reference_solutions: List[ReferenceSolution]
    user_id: UUID4
    created_at: datetime
    updated_at: datetime


class ProblemCreatedResponse(APIModel):
    success: bool = True
    message: str
    problem: ProblemResponse
