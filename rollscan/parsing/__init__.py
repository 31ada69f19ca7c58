"""
Record parsing over recognized text.

- normalize:  canonical names, reg numbers, phones, emails
- detectors:  per-line field patterns
- strategies: student grouping heuristics and the fallback selector
- scores:     subject score rows
"""

from .normalize import (
    normalize_name,
    normalize_reg_no,
    normalize_phone,
    normalize_email,
    synthesize_reg_no,
)
from .detectors import (
    SUBJECT_KEYWORDS,
    TABLE_HEADER_KEYWORDS,
    StudentDraft,
    detect_name,
    detect_reg_no,
    detect_phone,
    detect_email,
    detect_subject,
    is_name_line,
    is_table_header,
)
from .strategies import (
    DEFAULT_STRATEGIES,
    StrategyOutcome,
    build_strategies,
    windowed_strategy,
    block_strategy,
    table_strategy,
    select_students,
)
from .scores import parse_scores, subject_display_name

__all__ = [
    # Normalizer
    "normalize_name",
    "normalize_reg_no",
    "normalize_phone",
    "normalize_email",
    "synthesize_reg_no",

    # Detectors
    "SUBJECT_KEYWORDS",
    "TABLE_HEADER_KEYWORDS",
    "StudentDraft",
    "detect_name",
    "detect_reg_no",
    "detect_phone",
    "detect_email",
    "detect_subject",
    "is_name_line",
    "is_table_header",

    # Strategies
    "DEFAULT_STRATEGIES",
    "StrategyOutcome",
    "build_strategies",
    "windowed_strategy",
    "block_strategy",
    "table_strategy",
    "select_students",

    # Scores
    "parse_scores",
    "subject_display_name",
]
