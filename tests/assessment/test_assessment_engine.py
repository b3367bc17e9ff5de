import pytest

from services.assessment_engine.definitions import MODULES, TECHNICAL_ABILITY
from services.assessment_engine.engine import (
    AssessmentEngine,
    DEFAULT_QUESTION_BANK_PATH,
    DEFAULT_SUGGESTIONS_PATH,
)
from services.assessment_engine.loader import QuestionBankError
from services.assessment_engine.models import InvalidOptionIndexError

# Use the bundled assets for more realistic scoring tests
@pytest.fixture(scope="module")
def engine():
    """Provides an AssessmentEngine loaded with the bundled question bank."""
    try:
        return AssessmentEngine(DEFAULT_QUESTION_BANK_PATH, DEFAULT_SUGGESTIONS_PATH)
    except Exception as e:
        pytest.fail(f"Failed to initialize AssessmentEngine: {e}")


def answer_all(engine, option_index):
    return {idx: option_index for idx in range(len(engine.question_bank))}


def test_bundled_bank_covers_every_module(engine):
    assert len(engine.question_bank) == 15
    modules = [q.module for q in engine.question_bank]
    for module in MODULES:
        assert modules.count(module) == 3


def test_bundled_suggestions_cover_every_bucket(engine):
    assert set(engine.suggestion_table.total_score) == {"0-20", "21-40", "41-60", "61-80", "81-100"}
    for module in MODULES:
        assert set(engine.suggestion_table.modules[module]) == {"0-1", "1-2", "2-3", "3-4", "4-5"}


def test_get_questions_hides_option_scores(engine):
    questions = engine.get_questions()
    assert len(questions) == 15
    first = questions[0]
    assert first["index"] == 0
    assert first["module"] in MODULES
    assert all(isinstance(opt, str) for opt in first["options"])


def test_calculate_lowest_options(engine):
    """Every last option scores 1 on its own module only."""
    result = engine.calculate(answer_all(engine, 3))
    for module in MODULES:
        assert result.module_scores[module] == pytest.approx(1.0)
    assert result.total_score == 20


def test_calculate_top_options_beats_lowest(engine):
    top = engine.calculate(answer_all(engine, 0))
    low = engine.calculate(answer_all(engine, 3))
    assert top.total_score > low.total_score
    assert all(0 <= s <= 5 for s in top.module_scores.values())
    assert 0 <= top.total_score <= 100


def test_calculate_rejects_out_of_range_option(engine):
    answers = answer_all(engine, 0)
    answers[5] = 4
    with pytest.raises(InvalidOptionIndexError):
        engine.calculate(answers)


def test_suggest_returns_text_for_every_module(engine):
    result = engine.calculate(answer_all(engine, 1))
    suggestions = engine.suggest(result)
    assert suggestions.total
    assert set(suggestions.modules) == set(MODULES)
    assert all(suggestions.modules.values())
    assert suggestions.missing == []


def test_describe_levels(simple_engine):
    levels = simple_engine.describe_levels(simple_engine.calculate({idx: 1 for idx in range(5)}))
    assert set(levels.values()) == {"高级"}  # 3.0 of 5 is 60%


def test_get_progress(engine):
    progress = engine.get_progress({0: 1, 1: 2}, current_index=3)
    assert progress == {
        "totalQuestions": 15,
        "answeredQuestions": 2,
        "completionRate": 13.3,
        "currentModule": TECHNICAL_ABILITY,
    }


def test_get_progress_past_the_end(engine):
    progress = engine.get_progress(answer_all(engine, 0), current_index=15)
    assert progress["completionRate"] == 100.0
    assert progress["currentModule"] == "-"


def test_engine_missing_file_raises(tmp_path):
    with pytest.raises(QuestionBankError):
        AssessmentEngine(tmp_path / "missing.yml", DEFAULT_SUGGESTIONS_PATH)
