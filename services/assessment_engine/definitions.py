# services/assessment_engine/definitions.py
# Static definitions for the employability assessment: modules, weights and labels.

CREATIVITY = "创造力"
TECHNICAL_ABILITY = "技术能力"
TASK_EXECUTION = "任务理解与执行"
SOCIAL_ADAPTABILITY = "社交与应变"
PROBLEM_ANALYSIS = "问题拆解与分析"

# Fixed and exhaustive; order is the display order.
MODULES = (
    CREATIVITY,
    TECHNICAL_ABILITY,
    TASK_EXECUTION,
    SOCIAL_ADAPTABILITY,
    PROBLEM_ANALYSIS,
)

# Weights used for the 100-point total. Must sum to 1.0.
MODULE_WEIGHTS = {
    CREATIVITY: 0.20,
    TECHNICAL_ABILITY: 0.25,
    TASK_EXECUTION: 0.20,
    SOCIAL_ADAPTABILITY: 0.15,
    PROBLEM_ANALYSIS: 0.20,
}

MODULE_SCALE = 5     # normalized per-module scores live in [0, 5]
TOTAL_SCALE = 100    # total score lives in [0, 100]
MAX_OPTION_SCORE = 5  # ceiling for a single option's contribution to a module

BUCKET_WIDTH = 20  # percent
TOTAL_SCORE_RANGES = ["0-20", "21-40", "41-60", "61-80", "81-100"]
MODULE_SCORE_RANGES = ["0-1", "1-2", "2-3", "3-4", "4-5"]

# (minimum percentage, label), checked top-down
SCORE_LEVELS = [
    (80, "专家"),
    (60, "高级"),
    (40, "中级"),
    (20, "入门"),
]
LOWEST_SCORE_LEVEL = "初级"

VALID_GRADES = [
    "大一", "大二", "大三", "大四",
    "研一", "研二", "研三",
    "博一", "博二", "博三", "博四",
]

PHONE_PATTERN = r"^1[3-9]\d{9}$"
