# services/assessment_engine/scorer.py
# Handles scoring and suggestion lookup for the employability assessment.

import logging
import math
from typing import Dict, Mapping, Optional, Sequence, Union

from .definitions import (
    MODULES,
    MODULE_WEIGHTS,
    MODULE_SCALE,
    TOTAL_SCALE,
    MAX_OPTION_SCORE,
    BUCKET_WIDTH,
    TOTAL_SCORE_RANGES,
    MODULE_SCORE_RANGES,
    SCORE_LEVELS,
    LOWEST_SCORE_LEVEL,
)
from .models import (
    AssessmentResult,
    InvalidOptionIndexError,
    MissingAnswerError,
    ModuleScore,
    Question,
    QuestionBank,
    SuggestionTable,
    Suggestions,
    UnknownQuestionError,
    UnreachableModuleError,
)

logger = logging.getLogger(__name__)

QuestionsLike = Union[QuestionBank, Sequence[Question]]


def _questions(question_bank: QuestionsLike) -> Sequence[Question]:
    if isinstance(question_bank, QuestionBank):
        return question_bank.questions
    return question_bank


# --- Validation ---

def validate_answers(question_bank: QuestionsLike, answers: Mapping[int, int]) -> None:
    """
    Rejects answer sets the aggregator cannot score.

    Raises MissingAnswerError, UnknownQuestionError or InvalidOptionIndexError.
    """
    questions = _questions(question_bank)

    unknown = [idx for idx in answers if not isinstance(idx, int) or not 0 <= idx < len(questions)]
    if unknown:
        raise UnknownQuestionError(unknown)

    missing = [idx for idx in range(len(questions)) if idx not in answers]
    if missing:
        raise MissingAnswerError(missing)

    for idx, question in enumerate(questions):
        selected = answers[idx]
        # bool is an int subclass; negative indexes would silently pick from the end
        if isinstance(selected, bool) or not isinstance(selected, int) or not 0 <= selected < len(question.options):
            raise InvalidOptionIndexError(idx, selected, len(question.options))


# --- Scoring Functions ---

def aggregate_module_scores(question_bank: QuestionsLike, answers: Mapping[int, int]) -> Dict[str, ModuleScore]:
    """
    Sums weighted option contributions per module.

    Max only grows for modules present in the chosen option's score map, so a
    question tagged with one module can leave that module's max untouched when
    the chosen option scores elsewhere. Answers must already be validated.
    """
    module_scores = {module: ModuleScore() for module in MODULES}

    for idx, question in enumerate(_questions(question_bank)):
        selected_option = question.options[answers[idx]]
        weight = question.weight

        for module, score in selected_option.scores.items():
            if module not in module_scores:
                logger.warning(f"Question {idx} scores unknown module '{module}'; ignoring contribution.")
                continue
            module_scores[module].raw += score * weight
            module_scores[module].max_score += weight * MAX_OPTION_SCORE

    return module_scores


def normalize_module_score(module: str, module_score: ModuleScore) -> float:
    """Rescales a module's raw tally to the 0-5 range."""
    if not module_score.is_reachable:
        raise UnreachableModuleError([module])
    return (module_score.raw / module_score.max_score) * MODULE_SCALE


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_total_score(normalized_scores: Mapping[str, float], weights: Optional[Mapping[str, float]] = None) -> int:
    """Combines normalized module scores into an integer 0-100 total."""
    weights = MODULE_WEIGHTS if weights is None else weights

    missing = [module for module in MODULES if module not in weights]
    if missing:
        raise ValueError(f"Module weights missing for: {', '.join(missing)}")
    if not math.isclose(sum(weights[module] for module in MODULES), 1.0, abs_tol=1e-9):
        raise ValueError("Module weights must sum to 1.0")

    total = 0.0
    for module in MODULES:
        score = normalized_scores.get(module)
        if score is None:
            raise UnreachableModuleError([module])
        total += (score / MODULE_SCALE) * TOTAL_SCALE * weights[module]

    return round_half_up(total)


def compute_scores(question_bank: QuestionsLike, answers: Mapping[int, int]) -> AssessmentResult:
    """
    Scores a complete answer set.

    Args:
        question_bank: Ordered questions; answer keys are indexes into it.
        answers: Question index -> selected option index.

    Returns:
        An immutable AssessmentResult.

    Raises:
        MissingAnswerError, UnknownQuestionError, InvalidOptionIndexError:
            The answer set is incomplete or malformed.
        UnreachableModuleError: At least one module was never touched by a
            chosen option. Carries the normalized scores of the reachable modules.
    """
    validate_answers(question_bank, answers)
    module_scores = aggregate_module_scores(question_bank, answers)

    normalized: Dict[str, float] = {}
    unreachable = []
    for module, module_score in module_scores.items():
        if module_score.is_reachable:
            normalized[module] = normalize_module_score(module, module_score)
        else:
            unreachable.append(module)

    if unreachable:
        logger.warning(f"Unreachable modules after aggregation: {unreachable}")
        raise UnreachableModuleError(unreachable, partial_scores=normalized)

    total_score = compute_total_score(normalized)
    logger.debug(f"Calculated module scores: {normalized}, total: {total_score}")

    return AssessmentResult(
        module_scores=normalized,
        total_score=total_score,
        answers=dict(answers),
    )


# --- Bucketing and Labels ---

def get_score_range(score: float, max_score: float = MODULE_SCALE) -> str:
    """Maps a score to one of five fixed-width bucket labels for its scale."""
    if max_score <= 0:
        raise ValueError(f"max_score must be positive, got {max_score}")
    ranges = TOTAL_SCORE_RANGES if max_score == TOTAL_SCALE else MODULE_SCORE_RANGES

    percentage = score / max_score * 100
    range_index = min(max(math.floor(percentage / BUCKET_WIDTH), 0), len(ranges) - 1)
    return ranges[range_index]


def get_score_level(score: float, max_score: float = MODULE_SCALE) -> str:
    if max_score <= 0:
        raise ValueError(f"max_score must be positive, got {max_score}")
    percentage = (score / max_score) * 100
    for threshold, label in SCORE_LEVELS:
        if percentage >= threshold:
            return label
    return LOWEST_SCORE_LEVEL


# --- Suggestions ---

def lookup_suggestion(section: Optional[Mapping[str, str]], bucket: str) -> Optional[str]:
    """Returns the suggestion for a bucket, or None when the table has no entry."""
    if not section:
        return None
    return section.get(bucket)


def get_suggestions(result: AssessmentResult, suggestion_table: SuggestionTable) -> Suggestions:
    """Resolves total and per-module suggestions. Missing entries never raise."""
    missing = []

    total_range = get_score_range(result.total_score, TOTAL_SCALE)
    total = lookup_suggestion(suggestion_table.total_score, total_range)
    if total is None:
        missing.append(f"totalScore:{total_range}")

    modules: Dict[str, Optional[str]] = {}
    for module, score in result.module_scores.items():
        score_range = get_score_range(score, MODULE_SCALE)
        suggestion = lookup_suggestion(suggestion_table.modules.get(module), score_range)
        if suggestion is None:
            missing.append(f"{module}:{score_range}")
        modules[module] = suggestion

    if missing:
        logger.info(f"No suggestion found for: {missing}")

    return Suggestions(total=total, modules=modules, missing=missing)
