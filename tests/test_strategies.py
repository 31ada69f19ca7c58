from datetime import date

from rollscan.config import ExtractionConfig
from rollscan.models import CandidateStudent, RecognizedDocument
from rollscan.models.events import RECORD_ACCEPTED, STRATEGY_SELECTED, STRATEGY_START
from rollscan.parsing import (
    block_strategy,
    build_strategies,
    select_students,
    table_strategy,
    windowed_strategy,
)

YY = f"{date.today().year % 100:02d}"


def test_windowed_single_student():
    students = windowed_strategy(["John Adeyemi", "JSS1/0023", "08031234567", ""])

    assert students == [
        CandidateStudent(name="John Adeyemi", reg_no="JSS1/0023", parent_phone="+2348031234567")
    ]


def test_windowed_collects_email():
    students = windowed_strategy(["Ada Bola", "ada.parent@Mail.com"])

    assert students[0].parent_email == "ada.parent@mail.com"
    assert students[0].reg_no == f"STD/{YY}/001"


def test_windowed_consumes_four_lines_per_record():
    # The first window sees all three names but only keeps the first;
    # the cursor then jumps past them.
    students = windowed_strategy(["Ada Lovelace", "Alan Turing", "Grace Hopper"])

    assert [s.name for s in students] == ["Ada Lovelace"]


def test_windowed_next_record_after_advance():
    lines = ["Ada Lovelace", "AB/1234", "----", "----", "Alan Turing", "CD/5678"]
    students = windowed_strategy(lines)

    assert [(s.name, s.reg_no) for s in students] == [
        ("Ada Lovelace", "AB/1234"),
        ("Alan Turing", "CD/5678"),
    ]


def test_windowed_synthesized_numbers_count_accepted_records():
    lines = ["Ada Lovelace", "----", "----", "----", "Alan Turing"]
    students = windowed_strategy(lines)

    assert [s.reg_no for s in students] == [f"STD/{YY}/001", f"STD/{YY}/002"]


def test_windowed_ignores_blank_lines():
    text = "Ada Lovelace\n\nAB/1234\n\nAlan Turing\n\nCD/5678\n\nGrace Hopper\n\nEF/9999"
    students = windowed_strategy(text.split("\n"))

    # Six non-blank lines: the first window swallows Alan Turing, the
    # advance lands on Grace Hopper.
    assert [(s.name, s.reg_no) for s in students] == [
        ("Ada Lovelace", "AB/1234"),
        ("Grace Hopper", "EF/9999"),
    ]


def test_windowed_blank_lines_do_not_shift_the_window():
    padded = windowed_strategy(["Ada Lovelace", "", "", "", "", "", "", "AB/1234"])

    assert padded[0].reg_no == "AB/1234"


def test_windowed_lookahead_overlaps_advance():
    # Cursor 0 sees line 5 through its 6-line window; after advancing by 4
    # the window starting at line 4 sees the same line again.
    lines = ["1", "2", "3", "4", "5", "Late Name"]
    events = []
    students = windowed_strategy(lines, sink=events.append)

    assert [s.name for s in students] == ["Late Name", "Late Name"]
    assert [e.line_index for e in events if e.phase == RECORD_ACCEPTED] == [0, 4]


def test_windowed_window_stops_at_six_lines():
    lines = ["1", "2", "3", "4", "5", "6", "Late Name"]
    events = []
    windowed_strategy(lines, sink=events.append)

    assert [e.line_index for e in events if e.phase == RECORD_ACCEPTED][0] == 1


def test_windowed_custom_constants():
    lines = ["Ada Lovelace", "Alan Turing", "Grace Hopper"]
    students = windowed_strategy(lines, window_size=1, advance=1)

    assert [s.name for s in students] == ["Ada Lovelace", "Alan Turing", "Grace Hopper"]


def test_windowed_no_names():
    assert windowed_strategy(["12345", "JSS1/0023", ""]) == []
    assert windowed_strategy([]) == []


def test_block_strategy_two_students():
    text = "Mary Jane\nSSS2-0099\n\nPeter Obi\nJSS3-0012\n"
    students = block_strategy(text.split("\n"))

    assert [(s.name, s.reg_no) for s in students] == [
        ("Mary Jane", "SSS2-0099"),
        ("Peter Obi", "JSS3-0012"),
    ]


def test_block_strategy_skips_blocks_without_names():
    text = "Mary Jane\n\n   \n12345\n\nPeter Obi\n08031234567"
    students = block_strategy(text.split("\n"))

    assert [s.name for s in students] == ["Mary Jane", "Peter Obi"]
    assert [s.reg_no for s in students] == [f"STD/{YY}/001", f"STD/{YY}/002"]
    assert students[1].parent_phone == "+2348031234567"


def test_block_strategy_whole_block_is_the_window():
    lines = ["Ada Lovelace", "x", "y", "z", "w", "v", "u", "AB/1234"]
    students = block_strategy(lines)

    assert students[0].reg_no == "AB/1234"


def test_table_strategy_rows():
    lines = [
        "CLASS LIST JSS1",
        "Name        Reg No      Phone",
        "John Adeyemi  JSS1/0023  08031234567",
        "Mary Jane | SSS2-0099",
        "x",
        "Solo   ABC123",
        "Amaka\tObi\tJSS1/0040",
    ]
    students = table_strategy(lines)

    assert [s.to_dict() for s in students] == [
        {"name": "John Adeyemi", "regNo": "JSS1/0023", "parentPhone": "+2348031234567"},
        {"name": "Mary Jane", "regNo": "SSS2-0099"},
    ]


def test_table_strategy_tab_separated():
    lines = ["Student\tReg", "Chidi Okafor\tjss2/0101\t0803 123 4567 or 07011112222"]
    students = table_strategy(lines)

    assert students[0].name == "Chidi Okafor"
    assert students[0].reg_no == "JSS2/0101"
    assert students[0].parent_phone == "+2347011112222"


def test_table_strategy_skips_repeated_headers():
    lines = ["NAME  REG", "Student Name  Reg Number", "Bola Tinubu  AB/001"]
    students = table_strategy(lines)

    assert len(students) == 1
    assert students[0].name == "Bola Tinubu"


def test_table_strategy_skips_blank_rows():
    lines = ["Name  Reg", "", "John Adeyemi  JSS1/0023", "   ", "Mary Jane  SSS2-0099"]
    events = []
    students = table_strategy(lines, sink=events.append)

    assert [s.name for s in students] == ["John Adeyemi", "Mary Jane"]
    assert [e.line_index for e in events if e.phase == RECORD_ACCEPTED] == [1, 2]


def test_table_strategy_without_header():
    assert table_strategy(["John Adeyemi  JSS1/0023"]) == []


def test_selector_returns_windowed_output():
    lines = ["John Adeyemi", "JSS1/0023", "08031234567", ""]
    outcome = select_students(lines)

    assert outcome.strategy == "windowed"
    assert outcome.students == windowed_strategy(lines)
    assert outcome.attempted == ["windowed"]


def test_selector_never_merges():
    calls = []

    def first(lines, sink=None):
        calls.append("first")
        return [CandidateStudent(name="Ada Bola", reg_no="A/1")]

    def second(lines, sink=None):
        calls.append("second")
        return [CandidateStudent(name="Ngozi Eze", reg_no="B/2")]

    outcome = select_students([], [("first", first), ("second", second)])

    assert calls == ["first"]
    assert [s.name for s in outcome.students] == ["Ada Bola"]


def test_selector_falls_back_to_block():
    def nothing(lines, sink=None):
        return []

    lines = "Mary Jane\nSSS2-0099\n\nPeter Obi\nJSS3-0012".split("\n")
    outcome = select_students(lines, [("windowed", nothing), ("block", block_strategy)])

    assert outcome.strategy == "block"
    assert len(outcome.students) == 2


def test_selector_falls_back_to_table():
    lines = ["S/N  Name  Reg", "John Adeyemi  JSS1/0023", "Mary Jane  SSS2-0099"]
    events = []
    outcome = select_students(lines, sink=events.append)

    assert outcome.strategy == "table"
    assert outcome.attempted == ["windowed", "block", "table"]
    assert [s.name for s in outcome.students] == ["John Adeyemi", "Mary Jane"]
    assert [e.strategy for e in events if e.phase == STRATEGY_START] == ["windowed", "block", "table"]
    assert [e.value for e in events if e.phase == STRATEGY_SELECTED] == [2]
    assert len([e for e in events if e.phase == RECORD_ACCEPTED]) == 2


def test_selector_over_paragraph_separated_document():
    doc = RecognizedDocument.from_text(
        "Ada Lovelace\n\nAB/1234\n\nAlan Turing\n\nCD/5678\n\nGrace Hopper\n\nEF/9999"
    )
    outcome = select_students(doc.lines)

    assert outcome.strategy == "windowed"
    assert [s.name for s in outcome.students] == ["Ada Lovelace", "Grace Hopper"]


def test_selector_nothing_found():
    outcome = select_students(["12345", "", "!!"])

    assert outcome.strategy is None
    assert outcome.students == []


def test_build_strategies_binds_config():
    config = ExtractionConfig(window_size=1, window_advance=1)
    strategies = build_strategies(config)

    assert [name for name, _ in strategies] == ["windowed", "block", "table"]

    outcome = select_students(["Ada Lovelace", "Alan Turing"], strategies)
    assert len(outcome.students) == 2
