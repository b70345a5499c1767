"""
Unit tests for the UDisc CSV parsers and utilities.

Tests cover:
- Date parsing
- CSV tokenizing
- Header resolution
- Row selection and hole reconciliation
"""

import pytest
from datetime import datetime
from decimal import Decimal

from disc_tracker.errors import MalformedInput, RowNotFound
from disc_tracker.models.scorecard import RawCsvTable
from disc_tracker.parsers.csv_tokenizer import split_csv_line, tokenize
from disc_tracker.parsers.header_resolver import normalize_header, resolve_columns
from disc_tracker.parsers.round_reconciler import RoundReconciler, reconcile
from disc_tracker.utils.date_parser import parse_date, parse_date_safe


UDISC_HEADERS = [
    "PlayerName", "CourseName", "LayoutName", "StartDate", "EndDate",
    "Total", "+/-", "RoundRating", "Hole1", "Hole2", "Hole3",
]


def make_table(headers, *rows):
    """Build a RawCsvTable from positional row values."""
    return RawCsvTable(
        headers=list(headers),
        rows=[dict(zip(headers, values)) for values in rows],
    )


# =============================================================================
# Date Parser Tests
# =============================================================================

class TestDateParser:
    """Tests for date parsing utility."""

    def test_parse_udisc_format(self):
        """Test parsing UDisc's colon-less time format."""
        assert parse_date("2024-06-01 1432") == datetime(2024, 6, 1, 14, 32)

    def test_parse_date_only(self):
        """Test parsing date without time."""
        assert parse_date("2024-06-01") == datetime(2024, 6, 1)

    def test_parse_us_format(self):
        """Test parsing US date format."""
        assert parse_date("06/01/2024 2:32 PM") == datetime(2024, 6, 1, 14, 32)

    def test_parse_offset_converted_to_utc(self):
        """Test that timezone offsets fall through to pandas and become naive UTC."""
        assert parse_date("2024-06-01T14:32:00-05:00") == datetime(2024, 6, 1, 19, 32)

    def test_parse_invalid_raises(self):
        """Test that invalid date raises ValueError."""
        with pytest.raises(ValueError, match="Could not parse date"):
            parse_date("not a date")

    def test_parse_empty_raises(self):
        """Test that empty string raises ValueError."""
        with pytest.raises(ValueError, match="cannot be empty"):
            parse_date("   ")

    def test_parse_date_safe_returns_none(self):
        """Test parse_date_safe swallows failures."""
        assert parse_date_safe("not a date") is None
        assert parse_date_safe("") is None


# =============================================================================
# CSV Tokenizer Tests
# =============================================================================

class TestCsvTokenizer:
    """Tests for CSV tokenizing."""

    def test_quoted_comma_and_doubled_quote(self):
        """A quoted span keeps commas and unescapes doubled quotes."""
        fields = split_csv_line('Alice,"Course, ""The Bend""",3')
        assert fields == ['Alice', 'Course, "The Bend"', '3']

    def test_quoted_field_after_space(self):
        """A quote after a comma and space still opens a quoted span."""
        assert split_csv_line('a, "b, c"') == ['a', ' b, c']

    def test_mid_field_quote_opens_span(self):
        """A quote in the middle of a field keeps the following comma."""
        assert split_csv_line('Alice,Maple "Hill, North",3') == ['Alice', 'Maple Hill, North', '3']

    def test_mid_field_quote_keeps_hole_alignment(self):
        """Test strokes stay under their own hole after a mid-field quote."""
        table = tokenize('PlayerName,CourseName,Hole1,Hole2\nAlice,Maple "Hill, North",3,4\n')
        assert table.rows[0] == {
            "PlayerName": "Alice",
            "CourseName": "Maple Hill, North",
            "Hole1": "3",
            "Hole2": "4",
        }

    def test_unterminated_quote_runs_to_end_of_line(self):
        """An unclosed quote swallows the rest of the line into one field."""
        assert split_csv_line('a,"b,c') == ['a', 'b,c']

    def test_very_long_field(self):
        """Test fields far beyond csv.field_size_limit() are kept whole."""
        course = "x" * 200000
        table = tokenize(f"PlayerName,CourseName,Hole1\nAlice,{course},3\n")
        assert table.rows[0]["CourseName"] == course
        assert table.rows[0]["Hole1"] == "3"

    def test_headers_and_rows(self):
        """Test header order and trimmed row values."""
        table = tokenize("PlayerName, Hole1 ,Hole2\n  Alice , 3 ,4  \n")
        assert table.headers == ["PlayerName", "Hole1", "Hole2"]
        assert table.rows == [{"PlayerName": "Alice", "Hole1": "3", "Hole2": "4"}]

    def test_crlf_and_blank_lines(self):
        """Blank lines are dropped and CRLF endings handled."""
        table = tokenize("A,B\r\n\r\n1,2\r\n   \r\n3\r\n")
        assert len(table.rows) == 2
        assert table.rows[0] == {"A": "1", "B": "2"}

    def test_missing_trailing_fields_are_empty(self):
        """Short rows fill with empty strings, not missing keys."""
        table = tokenize("A,B,C\n1\n")
        assert table.rows[0] == {"A": "1", "B": "", "C": ""}

    def test_surplus_fields_ignored(self):
        """Fields beyond the header width are dropped."""
        table = tokenize("A\n1,2,3\n")
        assert table.rows[0] == {"A": "1"}

    def test_duplicate_header_last_column_wins(self):
        """A repeated header keeps the value from its last column."""
        table = tokenize("Hole,Hole\n3,4\n")
        assert table.headers == ["Hole", "Hole"]
        assert table.rows[0] == {"Hole": "4"}

    def test_bom_stripped_from_first_header(self):
        """Test a UTF-8 byte-order mark does not leak into the header."""
        table = tokenize("\ufeffPlayerName,Hole1\nAlice,3\n")
        assert table.headers[0] == "PlayerName"

    def test_header_only_raises(self):
        """Test a header with no data rows is rejected."""
        with pytest.raises(MalformedInput, match="no data rows"):
            tokenize("PlayerName,Hole1\n\n   \n")

    def test_empty_text_raises(self):
        """Test empty input is rejected."""
        with pytest.raises(MalformedInput):
            tokenize("")

    def test_blank_headers_raise(self):
        """Test a header line with only empty fields is rejected."""
        with pytest.raises(MalformedInput, match="no headers"):
            tokenize(",\n1,2\n")


# =============================================================================
# Header Resolver Tests
# =============================================================================

class TestHeaderResolver:
    """Tests for column resolution."""

    def test_normalize_header(self):
        """Test lowercasing and whitespace removal."""
        assert normalize_header(" Player\tName ") == "playername"

    def test_resolve_udisc_headers(self):
        """Test the standard UDisc header set."""
        cols = resolve_columns(UDISC_HEADERS)

        assert cols.player == "PlayerName"
        assert cols.course == "CourseName"
        assert cols.layout == "LayoutName"
        assert cols.start_time == "StartDate"
        assert cols.end_time == "EndDate"
        assert cols.total_strokes == "Total"
        assert cols.score_vs_par == "+/-"
        assert cols.round_rating == "RoundRating"
        assert cols.hole_columns == ("Hole1", "Hole2", "Hole3")

    def test_spaced_headers(self):
        """Test headers written with spaces and mixed case."""
        cols = resolve_columns(["Player Name", "Course Name", "Round Rating", "Hole 1"])
        assert cols.player == "Player Name"
        assert cols.course == "Course Name"
        assert cols.round_rating == "Round Rating"
        assert cols.hole_columns == ("Hole 1",)

    def test_playername_prefix_beats_earlier_player_column(self):
        """The higher-priority candidate wins even if it appears later."""
        cols = resolve_columns(["Player", "Player Name", "Hole1"])
        assert cols.player == "Player Name"

    def test_player_prefix_fallback(self):
        """Test the looser "player" prefix when no "playername" header exists."""
        cols = resolve_columns(["Player", "Hole1"])
        assert cols.player == "Player"

    def test_total_requires_exact_match(self):
        """A "Total Strokes" header is not the total column."""
        cols = resolve_columns(["Total Strokes", "Hole1"])
        assert cols.total_strokes == "Total"

    def test_missing_total_falls_back_to_literal(self):
        """A missing total column resolves to "Total" and looks up as empty."""
        cols = resolve_columns(["PlayerName", "Hole1"])
        assert cols.total_strokes == "Total"
        assert cols.value({"PlayerName": "Alice", "Hole1": "3"}, "total_strokes") == ""

    def test_score_vs_par_prefers_plus_minus(self):
        """The "+/-" candidate outranks "scorevspar"."""
        cols = resolve_columns(["Score vs Par", "+/-"])
        assert cols.score_vs_par == "+/-"

    def test_score_vs_par_substring(self):
        """Test substring matching for score-vs-par."""
        assert resolve_columns(["Score vs Par"]).score_vs_par == "Score vs Par"
        assert resolve_columns(["Round +/-"]).score_vs_par == "Round +/-"

    def test_hole_columns_in_column_order(self):
        """Test every header starting with "hole" is collected, in order."""
        cols = resolve_columns(["PlayerName", "Hole 2", "hole1", "Total", "HOLE_3"])
        assert cols.hole_columns == ("Hole 2", "hole1", "HOLE_3")

    def test_empty_headers_use_fallbacks(self):
        """Resolution never fails, even with no headers."""
        cols = resolve_columns([])
        assert cols.player == "Player Name"
        assert cols.course == "Course Name"
        assert cols.score_vs_par == "+/-"
        assert cols.hole_columns == ()


# =============================================================================
# Round Reconciler Tests
# =============================================================================

class TestRoundReconciler:
    """Tests for row selection and hole reconciliation."""

    @pytest.fixture
    def table(self):
        return make_table(
            UDISC_HEADERS,
            ["Par", "Maple Hill", "Gold", "", "", "9", "", "", "3", "3", "3"],
            ["Alice", "Maple Hill", "Gold", "2024-06-01 1432", "2024-06-01 1610",
             "8", "+2", "912", "3", "", "5"],
            ["Bob", "Maple Hill", "", "garbage", "", "", "E", "n/a", "4", "3", "x"],
        )

    def test_round_fields(self, table):
        """Test round-level values for the default player."""
        result = reconcile(table, resolve_columns(table.headers))

        assert result.player_name == "Alice"
        assert result.course_name == "Maple Hill"
        assert result.layout_name == "Gold"
        assert result.start_time == datetime(2024, 6, 1, 14, 32)
        assert result.end_time == datetime(2024, 6, 1, 16, 10)
        assert result.total_strokes == 8
        assert result.score_vs_par == 2
        assert result.round_rating == Decimal("912")
        assert result.holes_count == 3

    def test_dropped_hole_keeps_column_play_order(self, table):
        """A blank hole is filtered out without renumbering the rest."""
        result = reconcile(table, resolve_columns(table.headers))

        assert [h.play_order for h in result.holes] == [1, 3]
        assert [h.hole_label for h in result.holes] == ["1", "3"]
        assert [h.par for h in result.holes] == [3, 3]
        assert [h.strokes for h in result.holes] == [3, 5]

    def test_unparsable_values_become_none(self, table):
        """Bad dates, ratings and scores are nulls, not failures."""
        result = reconcile(table, resolve_columns(table.headers), "Bob")

        assert result.layout_name is None
        assert result.start_time is None
        assert result.end_time is None
        assert result.total_strokes is None
        assert result.score_vs_par is None
        assert result.round_rating is None
        assert [h.play_order for h in result.holes] == [1, 2]
        assert result.holes_count == 3

    def test_default_player_skips_par_and_blank_rows(self):
        """Test the first named, non-par row is selected."""
        headers = ["PlayerName", "Hole1"]
        table = make_table(headers, ["Par", "3"], ["", "9"], ["Alice", "4"])

        result = reconcile(table, resolve_columns(headers))

        assert result.player_name == "Alice"
        assert result.holes[0].strokes == 4

    def test_explicit_player_case_insensitive(self, table):
        """Test the explicit name matches regardless of ASCII case."""
        result = reconcile(table, resolve_columns(table.headers), "bOB")
        assert result.player_name == "Bob"

    def test_explicit_player_non_ascii_case_must_match(self):
        """Only ASCII letters are folded when matching names."""
        headers = ["PlayerName", "Hole1"]
        table = make_table(headers, ["Émile", "3"])

        with pytest.raises(RowNotFound):
            reconcile(table, resolve_columns(headers), "émile")

    def test_explicit_player_missing_fails_closed(self):
        """A missing named player never falls back to the default row."""
        headers = ["PlayerName", "Hole1"]
        table = make_table(headers, ["Par", "3"], ["Alice", "4"])

        with pytest.raises(RowNotFound, match='No row found for player "Bob"') as exc_info:
            reconcile(table, resolve_columns(headers), "Bob")

        assert exc_info.value.details["playerHeader"] == "PlayerName"
        assert exc_info.value.details["headers"] == headers

    def test_no_player_rows_raises(self):
        """Test only a par row means no default player."""
        headers = ["PlayerName", "Hole1"]
        table = make_table(headers, ["PAR", "3"], ["", "4"])

        with pytest.raises(RowNotFound, match="No player row found"):
            reconcile(table, resolve_columns(headers))

    def test_missing_par_row_gives_null_par(self):
        """Test holes still import when there is no par row."""
        headers = ["PlayerName", "Hole1", "Hole2"]
        table = make_table(headers, ["Alice", "3", "4"])

        result = reconcile(table, resolve_columns(headers))

        assert [h.par for h in result.holes] == [None, None]

    def test_blank_course_uses_placeholder(self):
        """Test an empty course name becomes the placeholder."""
        headers = ["PlayerName", "CourseName", "Hole1"]
        table = make_table(headers, ["Alice", "", "3"])

        result = reconcile(table, resolve_columns(headers))

        assert result.course_name == "Unknown course"

    def test_find_par_row(self, table):
        """Test the par row is located case-insensitively."""
        reconciler = RoundReconciler(table, resolve_columns(table.headers))
        assert reconciler.find_par_row()["PlayerName"] == "Par"

    @pytest.mark.parametrize("header,play_order,expected", [
        ("Hole1", 1, "1"),
        ("Hole 7A", 7, "7A"),
        ("hole 18", 18, "18"),
        ("Hole", 3, "3"),
    ])
    def test_hole_label(self, header, play_order, expected):
        """Test the leading "hole" token is stripped, with index fallback."""
        assert RoundReconciler.hole_label(header, play_order) == expected

    @pytest.mark.parametrize("value,expected", [
        ("4", 4),
        ("+3", 3),
        ("-2", -2),
        ("5*", 5),
        ("E", None),
        ("", None),
    ])
    def test_parse_int(self, value, expected):
        """Test leading-integer parsing."""
        assert RoundReconciler._parse_int(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("912", Decimal("912")),
        ("880.5", Decimal("880.5")),
        ("n/a", None),
        ("", None),
    ])
    def test_parse_decimal(self, value, expected):
        """Test round rating parsing."""
        assert RoundReconciler._parse_decimal(value) == expected
