import pytest

from excellent_md.core.cancellation import CancellationToken
from excellent_md.core.errors import (
    ConversionCancelled,
    ConversionTimeout,
    InvalidWorkbook,
    TooManySheets,
)
from excellent_md.core.excel2md.converter import (
    MarkdownConverter,
    combine_markdown,
    convert_workbook,
)
from excellent_md.core.excel2md.extractor import (
    FORMULAS_WARNING,
    MERGED_CELLS_WARNING,
    VISIBILITY_WARNING,
)
from excellent_md.core.excel2md.renderer import EMPTY_SHEET_MESSAGE
from excellent_md.core.metrics import InMemoryMetrics
from excellent_md.core.models import ConversionOptions, SheetOutcome, SkippedSheet


def _converter_for(workbook, **options) -> MarkdownConverter:
    return MarkdownConverter(
        options=ConversionOptions(**options),
        workbook_opener=lambda data: workbook,
    )


# ============ 真实 xlsx ============


def test_converts_single_sheet(make_xlsx) -> None:
    data = make_xlsx({"People": [["Name", "Age"], ["Asha", 29]]})

    result = convert_workbook(data)

    assert len(result.sheets) == 1
    sheet = result.sheets[0]
    assert sheet.name == "People"
    assert sheet.markdown == "| Name | Age |\n| --- | --- |\n| Asha | 29 |"
    assert sheet.error is None
    assert (sheet.row_count, sheet.col_count) == (2, 2)
    assert result.combined_markdown == (
        "## People\n| Name | Age |\n| --- | --- |\n| Asha | 29 |\n"
    )
    assert result.meta.sheet_count == 1
    assert result.meta.processed == 1
    assert result.meta.skipped_count == 0


def test_merge_and_formula_warnings_precede_table(make_xlsx) -> None:
    data = make_xlsx(
        {"Sheet1": [["Name"], ["Asha", "=SUM(1,2)"]]},
        merges={"Sheet1": ["A1:B1"]},
    )

    result = convert_workbook(data, ConversionOptions(max_sheets=10, max_cells_per_sheet=1000))

    sheet = result.sheets[0]
    assert MERGED_CELLS_WARNING in sheet.warnings
    assert FORMULAS_WARNING in sheet.warnings
    lines = result.combined_markdown.split("\n")
    assert lines[0] == "## Sheet1"
    assert lines[1] == f"> Warning: {MERGED_CELLS_WARNING}"
    assert lines[2] == f"> Warning: {FORMULAS_WARNING}"
    assert lines[3].startswith("| Name")


def test_sheets_keep_workbook_order(make_xlsx) -> None:
    data = make_xlsx({"Zeta": [["z"]], "Alpha": [["a"]], "Mid": [["m"]]})

    result = convert_workbook(data)

    assert [sheet.name for sheet in result.sheets] == ["Zeta", "Alpha", "Mid"]


def test_empty_sheet_renders_sentinel(make_xlsx) -> None:
    data = make_xlsx({"Empty": [], "Data": [["x"]]})

    result = convert_workbook(data)

    empty = result.sheets[0]
    assert empty.markdown == EMPTY_SHEET_MESSAGE
    assert (empty.row_count, empty.col_count) == (0, 0)


def test_hidden_sheets_are_skipped(make_xlsx) -> None:
    data = make_xlsx({"Visible": [["v"]], "Secret": [["s"]]}, hidden=("Secret",))

    result = convert_workbook(data)

    assert [sheet.name for sheet in result.sheets] == ["Visible"]
    assert result.skipped == [SkippedSheet(name="Secret", reason="hidden sheet")]
    assert result.meta.sheet_count == 2
    assert result.meta.processed == 1
    assert result.meta.skipped_count == 1
    assert "Secret" not in result.combined_markdown


def test_hidden_sheets_included_when_requested(make_xlsx) -> None:
    data = make_xlsx({"Visible": [["v"]], "Secret": [["s"]]}, hidden=("Secret",))

    result = convert_workbook(data, ConversionOptions(include_hidden_sheets=True))

    assert [sheet.name for sheet in result.sheets] == ["Visible", "Secret"]
    assert result.skipped == []


def test_invalid_workbook() -> None:
    with pytest.raises(InvalidWorkbook) as exc_info:
        convert_workbook(b"definitely not a zip archive")

    assert str(exc_info.value).startswith("invalid xlsx file:")
    assert exc_info.value.result is not None
    assert exc_info.value.result.sheets == []


def test_too_many_sheets(make_xlsx) -> None:
    data = make_xlsx({"A": [["a"]], "B": [["b"]], "C": [["c"]]})

    with pytest.raises(TooManySheets) as exc_info:
        convert_workbook(data, ConversionOptions(max_sheets=2))

    assert str(exc_info.value) == "workbook has too many sheets"
    shell = exc_info.value.result
    assert shell.meta.sheet_count == 3
    assert shell.sheets == []


def test_zero_max_sheets_is_unlimited(make_xlsx) -> None:
    data = make_xlsx({f"S{i}": [[str(i)]] for i in range(12)})

    result = convert_workbook(data, ConversionOptions(max_sheets=0))

    assert result.meta.processed == 12


def test_oversized_sheet_does_not_abort_siblings(make_xlsx) -> None:
    data = make_xlsx(
        {
            "Big": [["a", "b"], ["c", "d"], ["e", "f"]],
            "Small": [["x"]],
        }
    )

    result = convert_workbook(data, ConversionOptions(max_cells_per_sheet=5))

    big, small = result.sheets
    assert big.error == "sheet exceeds cell limit"
    assert big.markdown == ""
    assert (big.row_count, big.col_count) == (3, 2)
    assert small.error is None
    assert small.markdown == "| x |\n| --- |"
    assert "## Big\n> Error: sheet exceeds cell limit\n" in result.combined_markdown


def test_expired_token_fails_before_opening() -> None:
    opened: list[bytes] = []

    def opener(data: bytes):
        opened.append(data)
        raise AssertionError("workbook must not be opened")

    converter = MarkdownConverter(workbook_opener=opener)

    with pytest.raises(ConversionTimeout) as exc_info:
        converter.convert(b"ignored", CancellationToken.expired())

    assert opened == []
    assert exc_info.value.result.sheets == []


# ============ 内存工作簿 ============


def test_corrupt_sheet_is_isolated(fake_workbook) -> None:
    workbook = fake_workbook(
        {"Bad": [["a"], ["b"]], "Good": [["g"]]},
        broken={"Bad": 1},
    )

    result = _converter_for(workbook).convert(b"")

    bad, good = result.sheets
    assert "unable to read sheet 'Bad'" in bad.error
    assert bad.row_count == 1
    assert good.markdown == "| g |\n| --- |"
    assert workbook.closed


def test_indeterminate_visibility_processes_sheet(fake_workbook) -> None:
    workbook = fake_workbook({"Odd": [["a"]]}, indeterminate={"Odd"})

    result = _converter_for(workbook).convert(b"")

    assert result.skipped == []
    assert result.sheets[0].warnings == [VISIBILITY_WARNING]


def test_cancellation_aborts_remaining_sheets(fake_workbook) -> None:
    token = CancellationToken()

    def hook(sheet_name: str, row_idx: int) -> None:
        token.cancel("client went away")

    workbook = fake_workbook({"First": [["a"]], "Second": [["b"]]}, row_hook=hook)

    with pytest.raises(ConversionCancelled):
        _converter_for(workbook).convert(b"", token)

    assert workbook.closed


def test_timeout_during_extraction_is_fatal(fake_workbook) -> None:
    token = CancellationToken()

    def hook(sheet_name: str, row_idx: int) -> None:
        token.deadline = 0.0

    workbook = fake_workbook({"Only": [["a"], ["b"]]}, row_hook=hook)

    with pytest.raises(ConversionTimeout):
        _converter_for(workbook).convert(b"", token)

    assert workbook.closed


def test_metrics_port_sees_every_outcome(fake_workbook) -> None:
    metrics = InMemoryMetrics()
    workbook = fake_workbook(
        {"A": [["a"]], "B": [["b"]], "H": [["h"]]},
        hidden={"H"},
        broken={"B": 0},
    )
    converter = MarkdownConverter(metrics=metrics, workbook_opener=lambda data: workbook)

    converter.convert(b"")

    snapshot = metrics.snapshot()
    assert snapshot["sheets_total"] == 2
    assert snapshot["sheet_errors_total"] == 1


def test_formula_lookup_failure_is_isolated(fake_workbook) -> None:
    workbook = fake_workbook(
        {"Before": [["b"]], "Formulas": [["x"], ["y"]], "After": [["a"]]},
        formula_errors={"Formulas"},
    )

    result = _converter_for(workbook).convert(b"")

    before, broken, after = result.sheets
    assert "unable to read sheet 'Formulas'" in broken.error
    assert broken.markdown == ""
    assert broken.row_count == 1
    assert before.markdown == "| b |\n| --- |"
    assert after.markdown == "| a |\n| --- |"
    assert "> Error: unable to read sheet 'Formulas'" in result.combined_markdown


def test_metrics_skip_sheets_of_aborted_conversion(fake_workbook) -> None:
    metrics = InMemoryMetrics()
    token = CancellationToken()

    def hook(sheet_name: str, row_idx: int) -> None:
        if sheet_name == "Second":
            token.cancel("client went away")

    workbook = fake_workbook({"First": [["a"]], "Second": [["b"], ["c"]]}, row_hook=hook)
    converter = MarkdownConverter(metrics=metrics, workbook_opener=lambda data: workbook)

    with pytest.raises(ConversionCancelled):
        converter.convert(b"", token)

    assert metrics.snapshot()["sheets_total"] == 0


# ============ 合并文档 ============


def test_combine_markdown_layout() -> None:
    sheets = [
        SheetOutcome(name="One", markdown="| a |\n| --- |", warnings=["w1"]),
        SheetOutcome(name="", markdown="| ignored |\n| --- |"),
        SheetOutcome(name="Two", error="boom"),
    ]

    assert combine_markdown(sheets) == (
        "## One\n> Warning: w1\n| a |\n| --- |\n\n## Two\n> Error: boom\n"
    )


def test_combine_markdown_empty() -> None:
    assert combine_markdown([]) == ""
