"""API response models"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from insight_engine.models.analysis import AnalysisResult
from insight_engine.models.dataset import Row


class AuditInfo(BaseModel):
    """Trace of the executed analysis steps"""
    trace_id: str = Field(..., description="Trace id")
    steps: List[Dict[str, Any]] = Field(..., description="Executed steps")
    total_steps: int = Field(..., description="Step count")
    duration_ms: float = Field(0.0, description="Total duration (ms)")


class AnalysisResponse(BaseModel):
    """Analysis response"""
    result: Optional[AnalysisResult] = Field(None, description="Analysis result")
    audit: AuditInfo = Field(..., description="Audit trail")
    success: bool = Field(True, description="Whether the analysis succeeded")


class FilterResponse(BaseModel):
    """Filtered rows"""
    rows: List[Row] = Field(..., description="Rows that passed every condition")
    row_count: int = Field(..., ge=0, description="Number of rows returned")
