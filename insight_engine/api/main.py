"""FastAPI application"""

from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from insight_engine.core.config import settings
from insight_engine.engines.analysis_engine import AnalysisError, get_analysis_dispatcher
from insight_engine.engines.filter_engine import advanced_filter_data
from insight_engine.models import (
    AnalysisResponse,
    AuditInfo,
    Dataset,
    DatasetProfile,
    FilterCondition,
    FilterResponse,
    Intent,
    Row
)
from insight_engine.utils.logger import log
from insight_engine.utils.rate_limiter import get_rate_limiter
from insight_engine.utils.trace import TraceContext


app = FastAPI(
    title="Tabular Insight Engine",
    description="Statistics, charts, correlations and anomalies for tabular data",
    version="0.1.0",
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class DatasetRequest(BaseModel):
    """Rows plus optional column order"""
    rows: List[Row] = Field(default_factory=list)
    columns: List[str] = Field(default_factory=list)

    def to_dataset(self) -> Dataset:
        return Dataset(rows=self.rows, columns=self.columns)


class AnalysisRequest(DatasetRequest):
    """Analysis request"""
    query: str = ""
    intent: Intent = Field(default_factory=Intent)


class FilterRequest(DatasetRequest):
    """Filter request"""
    conditions: List[FilterCondition] = Field(default_factory=list)


def _check_rate_limit(req: Request) -> None:
    rate_limiter = get_rate_limiter()
    client_ip = req.client.host if req.client else "unknown"
    if not rate_limiter.is_allowed(client_ip):
        raise HTTPException(status_code=429, detail="Too many requests, try again later")


def _check_size(rows: List[Row]) -> None:
    if len(rows) > settings.max_request_rows:
        raise HTTPException(
            status_code=400,
            detail=f"Dataset exceeds row limit: {len(rows)} > {settings.max_request_rows}"
        )


@app.get("/")
async def root():
    return {
        "name": "Tabular Insight Engine",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.post("/analyze", response_model=AnalysisResponse)
async def analyze(request: AnalysisRequest, req: Request):
    """
    Analyse a dataset for a classified query

    Args:
        query: user question
        rows / columns: parsed dataset
        intent: intent descriptor from the classifier
    """
    log.info(f"Analysis request: {request.query[:50]!r}, {len(request.rows)} rows")
    _check_rate_limit(req)

    trace = TraceContext()
    try:
        result = get_analysis_dispatcher().run(request.intent, request.query, request.to_dataset(), trace=trace)
    except AnalysisError as e:
        log.warning(f"Analysis rejected: {e.code} - {e}")
        raise HTTPException(status_code=400, detail={"code": e.code, "message": str(e), **e.detail})
    except Exception as e:
        log.error(f"Analysis failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return AnalysisResponse(result=result, audit=AuditInfo(**trace.to_dict()), success=True)


@app.post("/filter", response_model=FilterResponse)
async def filter_rows(request: FilterRequest, req: Request):
    """Keep rows matching every condition"""
    log.info(f"Filter request: {len(request.rows)} rows, {len(request.conditions)} conditions")
    _check_rate_limit(req)
    _check_size(request.rows)

    rows = advanced_filter_data(request.rows, request.conditions)
    return FilterResponse(rows=rows, row_count=len(rows))


@app.post("/profile", response_model=DatasetProfile)
async def profile(request: DatasetRequest, req: Request):
    """Column types, date columns and missing values"""
    log.info(f"Profile request: {len(request.rows)} rows")
    _check_rate_limit(req)
    _check_size(request.rows)

    if not request.rows:
        raise HTTPException(status_code=400, detail="Data is required")
    return get_analysis_dispatcher().profile(request.to_dataset())


if __name__ == "__main__":
    import uvicorn

    log.info(f"Starting server: {settings.api_host}:{settings.api_port}")

    uvicorn.run(
        "insight_engine.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
