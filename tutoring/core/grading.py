# tutoring/core/grading.py

PERFORMANCE_LEVELS = [
    (90, "excellent"),
    (80, "very-good"),
    (70, "good"),
    (60, "fair"),
]


def performance_indicator(score: int, total_score: int = 100) -> str:
    if total_score <= 0:
        return "needs-improvement"
    percentage = score * 100 / total_score
    for threshold, label in PERFORMANCE_LEVELS:
        if percentage >= threshold:
            return label
    return "needs-improvement"
