import pytest

from cell_range import cells_in_range
from chart_spec import (
    AxisChartConfig,
    Chart,
    ChartKind,
    PieChartConfig,
    ScatterChartConfig,
    chart_from_selection,
)
from sheet import Sheet


@pytest.fixture
def sales_sheet():
    sheet = Sheet("sales")
    sheet.load_rows(
        [
            ["Region", "Q1", "Q2"],
            ["North", "1,200", 30],
            ["South", 800, "45%"],
            [None, None, None],
            ["East", "n/a", 10],
        ]
    )
    return sheet


def test_parse_kind():
    assert ChartKind.parse(" Pie ") is ChartKind.PIE
    assert ChartKind.parse(ChartKind.BAR) is ChartKind.BAR
    with pytest.raises(ValueError):
        ChartKind.parse("radar")


def test_config_must_match_kind():
    with pytest.raises(TypeError):
        Chart(ChartKind.PIE, "t", AxisChartConfig(x_key="x", y_keys=("y",)))
    Chart(ChartKind.SCATTER, "t", ScatterChartConfig(x_key="x", y_key="y"))


def test_bar_chart_from_selection(sales_sheet):
    chart = chart_from_selection("bar", cells_in_range("A1", "C5"), sales_sheet)
    assert chart.kind is ChartKind.BAR
    assert chart.title == "Bar of A1:C5"
    assert chart.range == "A1:C5"
    assert chart.config == AxisChartConfig(x_key="Region", y_keys=("Q1", "Q2"))
    assert chart.data == (
        {"Region": "North", "Q1": 1200.0, "Q2": 30},
        {"Region": "South", "Q1": 800, "Q2": 45.0},
        {"Region": "East", "Q1": None, "Q2": 10},
    )


def test_pie_chart_defaults(sales_sheet):
    chart = chart_from_selection(ChartKind.PIE, cells_in_range("A1", "B3"), sales_sheet, title="Share")
    assert chart.title == "Share"
    assert chart.config == PieChartConfig(label_key="Region", value_key="Q1")


def test_scatter_keeps_x_numeric(sales_sheet):
    chart = chart_from_selection("scatter", cells_in_range("B1", "C3"), sales_sheet)
    assert chart.config == ScatterChartConfig(x_key="Q1", y_key="Q2")
    assert chart.data[0] == {"Q1": 1200.0, "Q2": 30}


def test_chart_needs_data_rows(sales_sheet):
    with pytest.raises(ValueError):
        chart_from_selection("line", cells_in_range("A1", "C1"), sales_sheet)
    with pytest.raises(ValueError):
        chart_from_selection("line", [], sales_sheet)
