import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .loader import load_question_bank_from_file, load_suggestion_table_from_file
from .models import AssessmentResult, QuestionBank, SuggestionTable, Suggestions
from .scorer import compute_scores, get_score_level, get_suggestions

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent.parent.parent / "assets"
DEFAULT_QUESTION_BANK_PATH = ASSETS_DIR / "questions.yml"
DEFAULT_SUGGESTIONS_PATH = ASSETS_DIR / "suggestions.yml"


class AssessmentEngine:
    """
    Holds the question bank and suggestion table and exposes scoring over them.
    """
    def __init__(
        self,
        question_bank_path: Union[str, Path] = DEFAULT_QUESTION_BANK_PATH,
        suggestions_path: Union[str, Path] = DEFAULT_SUGGESTIONS_PATH,
        question_bank: Optional[QuestionBank] = None,
        suggestion_table: Optional[SuggestionTable] = None,
    ):
        """
        Loads both files unless already-parsed objects are given.

        Args:
            question_bank_path: YAML/JSON file with the ordered questions.
            suggestions_path: YAML/JSON file with the suggestion table.
            question_bank: Pre-loaded bank, skips reading question_bank_path.
            suggestion_table: Pre-loaded table, skips reading suggestions_path.
        """
        if question_bank is None:
            question_bank = load_question_bank_from_file(question_bank_path)
        if suggestion_table is None:
            suggestion_table = load_suggestion_table_from_file(suggestions_path)
        self.question_bank = question_bank
        self.suggestion_table = suggestion_table

    def get_questions(self) -> List[Dict[str, Any]]:
        """Returns the questions in presentation form, without per-option scores."""
        return [
            {
                "index": idx,
                "id": q.id,
                "module": q.module,
                "text": q.text,
                "options": [opt.text for opt in q.options],
            }
            for idx, q in enumerate(self.question_bank.questions)
        ]

    def calculate(self, answers: Mapping[int, int]) -> AssessmentResult:
        result = compute_scores(self.question_bank, answers)
        logger.info(f"Assessment scored: total={result.total_score}")
        return result

    def suggest(self, result: AssessmentResult) -> Suggestions:
        return get_suggestions(result, self.suggestion_table)

    def describe_levels(self, result: AssessmentResult) -> Dict[str, str]:
        return {module: get_score_level(score) for module, score in result.module_scores.items()}

    def get_progress(self, answers: Mapping[int, int], current_index: int = 0) -> Dict[str, Any]:
        total = len(self.question_bank)
        answered = len(answers)
        if 0 <= current_index < total:
            current_module = self.question_bank[current_index].module
        else:
            current_module = "-"
        return {
            "totalQuestions": total,
            "answeredQuestions": answered,
            "completionRate": round(answered / total * 100, 1) if total else 0.0,
            "currentModule": current_module,
        }
