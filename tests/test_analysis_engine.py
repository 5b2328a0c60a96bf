"""Analysis dispatcher tests"""

import pytest
from insight_engine.core.config import settings
from insight_engine.engines.analysis_engine import AnalysisDispatcher, AnalysisError
from insight_engine.models import ColumnType, Dataset, Intent
from insight_engine.utils.trace import TraceContext


@pytest.fixture
def dataset():
    return Dataset(rows=[
        {"date": "2024-01-15", "category": "A", "price": 10, "qty": 1},
        {"date": "2024-01-20", "category": "B", "price": 30, "qty": 3},
        {"date": "2024-02-10", "category": "A", "price": 20, "qty": 2},
        {"date": "2024-02-25", "category": "B", "price": None, "qty": 4},
    ])


@pytest.fixture
def dispatcher():
    return AnalysisDispatcher()


def _viz(chart_type=None, x=None, y=None):
    return Intent(type="visualization", visualization={"chartType": chart_type, "xAxis": x, "yAxis": y})


def test_statistics_branch(dispatcher, dataset):
    """Statistics per numeric column plus a bar chart of means"""
    result = dispatcher.dispatch(Intent(type="statistics"), "describe", dataset)
    assert result.type == "statistics"
    assert list(result.statistics) == ["price", "qty"]
    assert result.statistics["price"].mean == 20
    assert result.statistics["qty"].mean == 2.5
    assert [row["column"] for row in result.table] == ["price", "qty"]
    assert result.table[0]["count"] == 3
    assert result.table[0]["sum"] == 60
    assert result.table[0]["p25"] == 10
    assert result.table[0]["p75"] == 30
    assert result.chart.chart_type == "bar"
    assert result.chart.data == [{"name": "price", "value": 20}, {"name": "qty", "value": 2.5}]


def test_visualization_pie_sums(dispatcher, dataset):
    """Pie charts sum the y column per category"""
    result = dispatcher.dispatch(_viz("pie", "category", "price"), "share", dataset)
    assert result.chart.chart_type == "pie"
    assert result.chart.data == [{"name": "A", "value": 30}, {"name": "B", "value": 30}]


def test_visualization_bar_means(dispatcher, dataset):
    """Bar and line charts average the y column per category"""
    result = dispatcher.dispatch(_viz("bar", "category", "price"), "compare", dataset)
    assert result.chart.data == [{"category": "A", "price": 15}, {"category": "B", "price": 30}]
    assert result.chart.x_key == "category"
    assert result.chart.y_key == "price"


def test_visualization_date_axis_period(dispatcher, dataset):
    """Date x axes are bucketed by the period named in the query"""
    result = dispatcher.dispatch(_viz(None, "date", "qty"), "qty by month", dataset)
    assert result.chart.chart_type == "line"
    assert result.chart.data == [{"date": "2024-01", "qty": 2.0}, {"date": "2024-02", "qty": 3.0}]

    result = dispatcher.dispatch(_viz("line", "date", "qty"), "qty per year", dataset)
    assert result.chart.data == [{"date": "2024", "qty": 2.5}]

    result = dispatcher.dispatch(_viz("pie", "date", "qty"), "по месяцам", dataset)
    assert result.chart.data == [{"name": "2024-01", "value": 2.0}, {"name": "2024-02", "value": 3.0}]


def test_visualization_date_axis_default_day(dispatcher, dataset):
    """No period keyword groups by day"""
    result = dispatcher.dispatch(_viz("bar", "date", "qty"), "trend", dataset)
    assert [point["date"] for point in result.chart.data] == ["2024-01-15", "2024-01-20", "2024-02-10", "2024-02-25"]


def test_visualization_date_axis_any_chart_type(dispatcher, dataset):
    """Date axes are bucketed for chart types outside the category set"""
    result = dispatcher.dispatch(_viz("area", "date", "qty"), "qty by month", dataset)
    assert result.chart.chart_type == "area"
    assert result.chart.data == [{"date": "2024-01", "qty": 2.0}, {"date": "2024-02", "qty": 3.0}]


def test_visualization_scatter(dispatcher, dataset):
    """Scatter keeps rows where both axes parse"""
    result = dispatcher.dispatch(_viz("scatter", "price", "qty"), "relation", dataset)
    assert result.chart.data == [{"x": 10, "y": 1}, {"x": 30, "y": 3}, {"x": 20, "y": 2}]


def test_visualization_defaults_axes(dispatcher, dataset):
    """Missing axes default to the first column and first numeric column"""
    result = dispatcher.dispatch(Intent(type="visualization"), "chart by month", dataset)
    assert result.chart.x_key == "date"
    assert result.chart.y_key == "price"
    assert result.chart.data == [{"date": "2024-01", "price": 20.0}, {"date": "2024-02", "price": 20.0}]


def test_visualization_unknown_chart_type_falls_back(dispatcher, dataset):
    """Unsupported chart types leave the fallback bar of the first numeric mean"""
    result = dispatcher.dispatch(_viz("area", "category", "price"), "show", dataset)
    assert result.table is None
    assert result.chart.chart_type == "bar"
    assert result.chart.data == [{"name": "price", "value": 20}]


def test_correlation_keywords(dispatcher, dataset):
    """Correlation keywords attach a matrix and retype the result"""
    result = dispatcher.dispatch(Intent(), "correlation of price and qty", dataset)
    assert result.type == "correlations"
    assert result.correlations.columns == ["price", "qty"]
    assert result.correlations.matrix["price"]["qty"] == 1.0
    assert len(result.table) == 4


def test_correlation_needs_two_numeric_columns(dispatcher):
    """A single numeric column keeps the original type"""
    data = Dataset(rows=[{"n": 1, "s": "a"}, {"n": 2, "s": "b"}])
    result = dispatcher.dispatch(Intent(), "корреляция", data)
    assert result.type == "text"
    assert result.correlations is None


def test_text_branch_and_fallback_chart(dispatcher):
    """Text intents return the first 20 rows and a bar chart synthesized from them"""
    data = Dataset(rows=[{"name": f"item{i}", "score": i} for i in range(25)])
    result = dispatcher.dispatch(Intent(message="Here you go"), "list items", data)
    assert result.type == "text"
    assert result.message == "Here you go"
    assert len(result.table) == 20
    assert result.chart.chart_type == "bar"
    assert result.chart.x_key == "score"
    assert len(result.chart.data) == 20
    assert result.chart.data[3] == {"score": 3, "value": 3.0}


def test_default_message(dispatcher, dataset):
    """Empty narrative gets the default message"""
    result = dispatcher.dispatch(Intent(), "hello", dataset)
    assert result.message == "Query processed"


def test_sql_branch_limits_rows(dispatcher):
    """Table operations return the first 50 rows"""
    data = Dataset(rows=[{"n": i} for i in range(60)])
    assert len(dispatcher.dispatch(Intent(type="sql"), "select rows", data).table) == 50
    assert len(dispatcher.dispatch(Intent(sql=True), "select rows", data).table) == 50


def test_sql_anomalies(dispatcher):
    """Anomaly keywords replace the table with outliers"""
    amounts = [10, 11, 9, 10, 12, 10, 11, 9, 10, 100]
    data = Dataset(rows=[{"id": i + 1, "amount": v} for i, v in enumerate(amounts)])
    result = dispatcher.dispatch(Intent(type="sql"), "find anomalies", data)
    assert result.table == [{"column": "amount", "row_index": 9, "value": 100, "deviation": 3.0}]
    assert result.chart.x_key == "row_index"
    assert result.chart.data == [{"row_index": 9, "value": 9.0}]


def test_sql_anomalies_none_found(dispatcher, dataset):
    """An empty anomaly table draws no chart"""
    result = dispatcher.dispatch(Intent(type="sql"), "покажи аномалии", dataset)
    assert result.table == []
    assert result.chart is None


def test_no_numeric_columns_no_chart(dispatcher):
    """Without numeric columns nothing is charted"""
    data = Dataset(rows=[{"s": "a"}, {"s": "b"}])
    result = dispatcher.dispatch(Intent(), "list", data)
    assert result.chart is None
    assert len(result.table) == 2


def test_trace_records_steps(dispatcher, dataset):
    """Executed steps are recorded on the trace"""
    trace = TraceContext()
    dispatcher.dispatch(Intent(type="statistics"), "correlation", dataset, trace=trace)
    steps = [s["step"] for s in trace.to_dict()["steps"]]
    assert steps == ["detect_types", "branch:statistics", "correlations"]


def test_precomputed_types_are_used(dispatcher, dataset):
    """Supplied column types skip inference"""
    result = dispatcher.dispatch(
        Intent(type="statistics"), "describe", dataset,
        column_types={"qty": ColumnType.NUMBER}, date_columns=[]
    )
    assert list(result.statistics) == ["qty"]


def test_run_validates_request(dispatcher, dataset):
    """Empty queries and empty datasets are rejected"""
    with pytest.raises(AnalysisError) as exc:
        dispatcher.run(Intent(), "   ", dataset)
    assert exc.value.code == "EMPTY_QUERY"

    with pytest.raises(AnalysisError) as exc:
        dispatcher.run(Intent(), "describe", Dataset())
    assert exc.value.code == "NO_DATA"


def test_run_row_limit(dispatcher, dataset, monkeypatch):
    """Oversized datasets are rejected"""
    monkeypatch.setattr(settings, "max_request_rows", 2)
    with pytest.raises(AnalysisError) as exc:
        dispatcher.run(Intent(), "describe", dataset)
    assert exc.value.code == "TOO_MANY_ROWS"
    assert exc.value.detail == {"row_count": 4, "limit": 2}


def test_profile(dispatcher, dataset):
    """Profile reports types, date columns and missing values"""
    profile = dispatcher.profile(dataset)
    assert profile.row_count == 4
    assert profile.column_count == 4
    assert profile.column_types["date"] == ColumnType.DATE
    assert profile.column_types["category"] == ColumnType.STRING
    assert profile.numeric_columns == ["price", "qty"]
    assert profile.date_columns == ["date"]
    assert profile.missing_values["price"].count == 1
    assert profile.missing_values["price"].percentage == 25.0
