from datetime import date
from typing import Optional


def get_current_month_year(today: Optional[date] = None) -> str:
    """Local calendar month as YYYY-MM"""
    today = today or date.today()
    return f"{today.year}-{today.month:02d}"


def calculate_performance_percentage(
    completed_hours: float,
    target_hours: float,
    completed_story_points: float,
    target_story_points: float,
) -> float:
    """Average of the hours and story point completion ratios, as a percentage.

    A zero target drops that ratio from the average; both zero gives 0.
    The result is not clamped, so over-achievement reports above 100.
    """
    if target_hours == 0 and target_story_points == 0:
        return 0.0
    if target_hours == 0:
        return completed_story_points / target_story_points * 100
    if target_story_points == 0:
        return completed_hours / target_hours * 100
    return (completed_hours / target_hours + completed_story_points / target_story_points) / 2 * 100
