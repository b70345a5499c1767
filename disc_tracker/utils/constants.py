"""
Constants for Disc Tracker.

This module contains all magic strings, header matching rules, and
configuration values used throughout the application. Centralizing these
makes it easy to teach the importer a new exporter dialect: adding a
header variant is a change to COLUMN_RULES, not to the resolver logic.
"""

from typing import Dict, List, Tuple


# =============================================================================
# ROUND SOURCES
# =============================================================================

SOURCE_MANUAL = "manual"
SOURCE_UDISC_IMPORT = "udisc-import"


# =============================================================================
# PLACEHOLDERS
# =============================================================================

# Player-name value that marks the course par row in a UDisc export
PAR_ROW_NAME = "par"

DEFAULT_COURSE_NAME = "Unknown course"
DEFAULT_PLAYER_NAME = "Unknown player"


# =============================================================================
# HEADER MATCHING
# =============================================================================
# Headers are normalized (lowercased, all whitespace removed) before matching.
# Each logical field lists its candidates in priority order; for each
# candidate the first header in column order that satisfies it wins. If no
# candidate matches, the literal fallback header is used, and lookups against
# it simply yield empty strings.

MATCH_EXACT = "exact"
MATCH_PREFIX = "prefix"
MATCH_CONTAINS = "contains"

COLUMN_RULES: Dict[str, Tuple[List[Tuple[str, str]], str]] = {
    'player': (
        [(MATCH_PREFIX, 'playername'), (MATCH_PREFIX, 'player')],
        'Player Name',
    ),
    'course': ([(MATCH_PREFIX, 'coursename')], 'Course Name'),
    'layout': ([(MATCH_PREFIX, 'layoutname')], 'Layout Name'),
    'start_time': ([(MATCH_PREFIX, 'startdate')], 'Start Date'),
    'end_time': ([(MATCH_PREFIX, 'enddate')], 'End Date'),
    'total_strokes': ([(MATCH_EXACT, 'total')], 'Total'),
    'score_vs_par': (
        [(MATCH_CONTAINS, '+/-'), (MATCH_CONTAINS, 'scorevspar')],
        '+/-',
    ),
    'round_rating': ([(MATCH_PREFIX, 'roundrating')], 'Round Rating'),
}

HOLE_COLUMN_PREFIX = "hole"


# =============================================================================
# DATE FORMATS
# =============================================================================
# UDisc writes "2024-06-01 1432" (no colon between hours and minutes).
# Anything not listed here is handed to pandas' flexible parser.

DATE_FORMATS: List[str] = [
    "%Y-%m-%d %H%M",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%d",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
]


# =============================================================================
# UPLOAD LIMITS
# =============================================================================

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
