import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import ValidationError

from services.assessment_engine.definitions import MODULES
from services.assessment_engine.models import QuestionBank, SuggestionTable

logger = logging.getLogger(__name__)


class QuestionBankError(ValueError):
    """Raised for question bank or suggestion table problems not covered by Pydantic."""
    pass


def _read_file(file_path: Union[str, Path]) -> Any:
    path = Path(file_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except FileNotFoundError:
        raise QuestionBankError(f"File not found: {file_path}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise QuestionBankError(f"Error parsing file {file_path}: {e}")

    if data is None:
        raise QuestionBankError(f"File is empty or invalid: {file_path}")
    return data


def load_question_bank_data(data: Union[List[Dict[str, Any]], Dict[str, Any]]) -> QuestionBank:
    """
    Validates raw question data and returns a QuestionBank.

    Accepts either a bare list of questions or a mapping with a "questions" key.
    """
    if isinstance(data, list):
        data = {"questions": data}

    try:
        bank = QuestionBank.model_validate(data)
    except ValidationError as e:
        # Re-raise Pydantic's validation error for schema issues
        raise e

    question_ids = set()
    for idx, question in enumerate(bank.questions):
        if question.id is None:
            continue
        if question.id in question_ids:
            raise QuestionBankError(f"Duplicate question ID '{question.id}' at index {idx}")
        question_ids.add(question.id)

    uncovered = [m for m in MODULES if not any(q.module == m for q in bank.questions)]
    if uncovered:
        logger.warning(f"Question bank has no questions tagged with: {uncovered}")

    return bank


def load_question_bank_from_file(file_path: Union[str, Path]) -> QuestionBank:
    """Loads a question bank from a YAML or JSON file."""
    bank = load_question_bank_data(_read_file(file_path))
    logger.info(f"Loaded {len(bank)} questions from {file_path}")
    return bank


def load_suggestion_table_data(data: Dict[str, Any]) -> SuggestionTable:
    if not isinstance(data, dict):
        raise QuestionBankError("Suggestion table must be a mapping")

    table = SuggestionTable.model_validate(data)

    unknown = [module for module in table.modules if module not in MODULES]
    if unknown:
        raise QuestionBankError(f"Suggestion table references unknown modules: {unknown}")
    return table


def load_suggestion_table_from_file(file_path: Union[str, Path]) -> SuggestionTable:
    return load_suggestion_table_data(_read_file(file_path))
