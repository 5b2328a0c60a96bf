"""Analysis models"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from insight_engine.models.dataset import Row


class StatisticsResult(BaseModel):
    """Descriptive statistics of one numeric column (population formulas)"""
    column: str = Field(..., description="Column name")
    count: int = Field(..., ge=1, description="Numeric value count")
    mean: float
    median: float
    mode: float
    min: float
    max: float
    sum: float
    std_dev: float
    variance: float
    q1: float
    q3: float
    iqr: float
    p25: float
    p75: float
    p90: float
    p95: float
    p99: float
    skewness: float
    kurtosis: float


class AnomalyRecord(BaseModel):
    """Outlier found in a numeric column"""
    row_index: int = Field(..., ge=0, description="Index of the row in the dataset")
    value: float = Field(..., description="Parsed cell value")
    deviation: float = Field(..., description="Signed z-score, 2 decimals")


class CorrelationMatrix(BaseModel):
    """Pairwise Pearson coefficients"""
    matrix: Dict[str, Dict[str, float]] = Field(..., description="colA -> colB -> r")
    columns: List[str] = Field(..., description="Columns in matrix order")


class AggregateRecord(BaseModel):
    """One reduced group"""
    group: str = Field(..., description="Group key")
    value: float = Field(..., description="Reduced value, 2 decimals")
    count: int = Field(..., ge=0, description="Rows in the group")


class FilterCondition(BaseModel):
    """Single row filter condition"""
    column: str = Field(..., description="Column name")
    operator: str = Field(..., description="equals, notEquals, contains, ..., isNull, isEmpty")
    value: Any = Field(None, description="Operand; [lo, hi] for between, list for in")
    logic: str = Field("AND", description="AND/OR tag (conditions are always combined with AND)")

    @field_validator("logic", mode="before")
    @classmethod
    def normalize_logic(cls, v: Any) -> str:
        if v is None:
            return "AND"
        return str(v).upper()


class ChartSpec(BaseModel):
    """Chart-ready data"""
    chart_type: str = Field(..., description="line, bar, pie, scatter")
    data: List[Dict[str, Any]] = Field(default_factory=list, description="Ordered points")
    x_key: str = Field(..., description="Key of the x value in each point")
    y_key: str = Field(..., description="Key of the y value in each point")


class IntentType(str, Enum):
    """Classified query intent"""
    STATISTICS = "statistics"
    VISUALIZATION = "visualization"
    CORRELATIONS = "correlations"
    SQL = "sql"
    TEXT = "text"


class VisualizationSpec(BaseModel):
    """Chart request produced by the classifier"""
    chart_type: Optional[str] = Field(None, alias="chartType", description="line, bar, pie, scatter")
    x_axis: Optional[str] = Field(None, alias="xAxis", description="X axis column")
    y_axis: Optional[str] = Field(None, alias="yAxis", description="Y axis column")

    model_config = {"populate_by_name": True}


class Intent(BaseModel):
    """Structured intent descriptor from the external classifier"""
    type: IntentType = Field(IntentType.TEXT, description="Intent type")
    visualization: Optional[VisualizationSpec] = Field(None, description="Chart request")
    sql: bool = Field(False, description="Query asks for a table operation")
    message: str = Field("", description="Narrative answer")
    description: str = Field("", description="Longer explanation")
    insights: List[str] = Field(default_factory=list, description="Bullet insights")

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> IntentType:
        if isinstance(v, IntentType):
            return v
        try:
            return IntentType(str(v).strip().lower())
        except ValueError:
            return IntentType.TEXT

    @field_validator("sql", mode="before")
    @classmethod
    def normalize_sql(cls, v: Any) -> bool:
        return bool(v)

    @field_validator("insights", mode="before")
    @classmethod
    def normalize_insights(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return [str(item) for item in v]


class AnalysisResult(BaseModel):
    """Dispatcher output handed to the presentation layer"""
    type: str = Field(..., description="Result type")
    table: Optional[List[Row]] = Field(None, description="Table rows")
    chart: Optional[ChartSpec] = Field(None, description="Chart data")
    statistics: Optional[Dict[str, StatisticsResult]] = Field(None, description="Statistics per column")
    correlations: Optional[CorrelationMatrix] = Field(None, description="Correlation matrix")
    message: str = Field("", description="Narrative answer")
    description: str = Field("", description="Longer explanation")
    insights: List[str] = Field(default_factory=list, description="Bullet insights")
