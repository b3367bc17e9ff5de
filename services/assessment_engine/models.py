from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .definitions import MODULES, MAX_OPTION_SCORE


class AnswerOption(BaseModel):
    text: str = ""
    scores: Dict[str, float]  # module -> contribution before weighting

    @field_validator("scores")
    @classmethod
    def validate_contributions(cls, v: Dict[str, float]) -> Dict[str, float]:
        for module, score in v.items():
            if score < 0 or score > MAX_OPTION_SCORE:
                raise ValueError(
                    f"Contribution {score} for module '{module}' is outside [0, {MAX_OPTION_SCORE}]."
                )
        return v


class Question(BaseModel):
    id: Optional[str] = None
    module: str
    text: str = ""
    weight: float = Field(..., gt=0)
    options: List[AnswerOption] = Field(..., min_length=1)

    @field_validator("module")
    @classmethod
    def validate_module(cls, v: str) -> str:
        if v not in MODULES:
            raise ValueError(f"Unknown module '{v}'. Expected one of: {', '.join(MODULES)}")
        return v


class QuestionBank(BaseModel):
    questions: List[Question] = Field(..., min_length=1)

    def __len__(self) -> int:
        return len(self.questions)

    def __getitem__(self, index: int) -> Question:
        return self.questions[index]

    def __iter__(self):
        return iter(self.questions)


class ModuleScore(BaseModel):
    """Running raw/max tally for one module. Normalization lives in the scorer."""
    raw: float = 0.0
    max_score: float = 0.0

    @property
    def is_reachable(self) -> bool:
        return self.max_score > 0


class AssessmentResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    module_scores: Dict[str, float] = Field(..., alias="moduleScores")
    total_score: int = Field(..., ge=0, le=100, alias="totalScore")
    answers: Dict[int, int]

    @field_validator("module_scores", "answers")
    @classmethod
    def freeze_mapping(cls, v: Mapping) -> Mapping:
        # frozen=True only blocks reassignment; the mappings must be read-only too
        return MappingProxyType(dict(v))

    @field_serializer("module_scores")
    def serialize_module_scores(self, v: Mapping[str, float]) -> Dict[str, float]:
        return dict(v)

    @field_serializer("answers")
    def serialize_answers(self, v: Mapping[int, int]) -> Dict[int, int]:
        return dict(v)


class SuggestionTable(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_score: Dict[str, str] = Field(default_factory=dict, alias="totalScore")
    modules: Dict[str, Dict[str, str]] = Field(default_factory=dict)


class Suggestions(BaseModel):
    total: Optional[str] = None
    modules: Dict[str, Optional[str]] = Field(default_factory=dict)
    missing: List[str] = Field(default_factory=list)  # "<section>:<bucket>" lookups with no entry


# Custom Error Classes
class ScoringError(ValueError):
    """Base class for errors raised while scoring an answer set."""
    pass


class MissingAnswerError(ScoringError):
    """Raised when the answer set does not cover every question."""

    def __init__(self, missing: List[int]):
        self.missing = sorted(missing)
        super().__init__(f"Missing answers for questions: {', '.join(str(i) for i in self.missing)}")


class InvalidOptionIndexError(ScoringError):
    """Raised when a selected option index is outside the question's options."""

    def __init__(self, question_index: int, option_index, option_count: int):
        self.question_index = question_index
        self.option_index = option_index
        self.option_count = option_count
        super().__init__(
            f"Invalid option index {option_index!r} for question {question_index} "
            f"(expected 0..{option_count - 1})"
        )


class UnknownQuestionError(ScoringError):
    """Raised when the answer set references a question not in the bank."""

    def __init__(self, question_indexes: List[int]):
        self.question_indexes = sorted(question_indexes)
        super().__init__(f"Answers reference unknown questions: {', '.join(str(i) for i in self.question_indexes)}")


class UnreachableModuleError(ScoringError):
    """Raised when a module accumulated no max score, so it cannot be normalized."""

    def __init__(self, modules: List[str], partial_scores: Optional[Dict[str, float]] = None):
        self.modules = list(modules)
        self.partial_scores = dict(partial_scores or {})
        super().__init__(f"Module unreachable: {', '.join(self.modules)}")
