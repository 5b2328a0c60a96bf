"""Data models"""

from insight_engine.models.dataset import (
    CellValue,
    Row,
    ColumnType,
    Dataset,
    MissingValueInfo,
    DatasetProfile
)
from insight_engine.models.analysis import (
    StatisticsResult,
    AnomalyRecord,
    CorrelationMatrix,
    AggregateRecord,
    FilterCondition,
    ChartSpec,
    IntentType,
    VisualizationSpec,
    Intent,
    AnalysisResult
)
from insight_engine.models.response import (
    AuditInfo,
    AnalysisResponse,
    FilterResponse
)

__all__ = [
    # Dataset
    "CellValue",
    "Row",
    "ColumnType",
    "Dataset",
    "MissingValueInfo",
    "DatasetProfile",
    # Analysis
    "StatisticsResult",
    "AnomalyRecord",
    "CorrelationMatrix",
    "AggregateRecord",
    "FilterCondition",
    "ChartSpec",
    "IntentType",
    "VisualizationSpec",
    "Intent",
    "AnalysisResult",
    # Response
    "AuditInfo",
    "AnalysisResponse",
    "FilterResponse",
]
