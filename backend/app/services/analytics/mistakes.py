"""
Mistake Aggregation

Tallies the error categories a student assigned to the topics they lost
points on. Uncategorized topics are skipped. Interpretation of the counts is
left to the feedback generator.
"""

from collections import Counter
from collections.abc import Iterable, Mapping

from app.config import yaml_config
from app.enums.analytics import ErrorCategory
from app.models.analytics import MistakeCount, MistakeEntry


def aggregate_mistakes(entries: Iterable[MistakeEntry]) -> dict[ErrorCategory, int]:
    """
    Count categorized mistakes.

    Args:
        entries: (topic, category) assignments; category None means skipped.

    Returns:
        Mapping of category to occurrences. Only categories that occur appear,
        in enum order.
    """
    counts = Counter(entry.category for entry in entries if entry.category is not None)
    return {category: counts[category] for category in ErrorCategory if counts[category]}


def mistake_distribution(counts: Mapping[ErrorCategory, int]) -> list[MistakeCount]:
    """Counts as a list sorted by count descending, then category value."""
    items = [
        MistakeCount(category=ErrorCategory(category), count=int(count))
        for category, count in counts.items()
        if count > 0
    ]
    return sorted(items, key=lambda item: (-item.count, item.category.value))


def category_label(category: ErrorCategory) -> str:
    """Display label from config/default.yaml, falling back to the category name."""
    labels = yaml_config.get("error_categories", {}) or {}
    return labels.get(category.value) or category.value.replace("_", " ").title()


def format_error_analysis(counts: Mapping[ErrorCategory, int]) -> str:
    """
    Render the counts as the listing the mistake feedback flow expects.

    Example:
        - Knowledge Gap: 2 mistakes
        - Time Pressure: 1 mistakes
    """
    return "\n".join(
        f"- {category_label(item.category)}: {item.count} mistakes"
        for item in mistake_distribution(counts)
    )
