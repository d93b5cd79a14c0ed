"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

from app.matching.engine import (
    ACADEMIC_LEVEL_POINTS,
    FIELD_OF_STUDY_POINTS,
    INTEREST_POINTS,
)

# Highest score reachable without any hard-check bonus
SOFT_SIGNAL_MAXIMUM = ACADEMIC_LEVEL_POINTS + FIELD_OF_STUDY_POINTS + INTEREST_POINTS


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    matching = config_dict.get("matching", {})
    if not isinstance(matching, dict):
        return warning_messages

    threshold = matching.get("inclusion_threshold")
    if isinstance(threshold, int):
        if threshold > SOFT_SIGNAL_MAXIMUM:
            warning_messages.append(
                f"inclusion_threshold ({threshold}) exceeds the soft-signal maximum "
                f"({SOFT_SIGNAL_MAXIMUM}); only scholarships with several eligibility "
                "restrictions can be recommended"
            )
        elif threshold == 0:
            warning_messages.append(
                "inclusion_threshold is 0; every eligible scholarship will be recommended"
            )

    categories = matching.get("interest_categories", {})
    if isinstance(categories, dict):
        for name, fields in categories.items():
            if isinstance(fields, list) and not any(
                isinstance(f, str) and f.strip() for f in fields
            ):
                warning_messages.append(
                    f"Interest category '{name}' has no fields and will be ignored"
                )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
