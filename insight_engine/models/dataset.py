"""Dataset models"""

import math
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import numpy as np
import pandas as pd
from pydantic import BaseModel, Field, model_validator

CellValue = Optional[Union[bool, int, float, str]]
Row = Dict[str, CellValue]


class ColumnType(str, Enum):
    """Inferred column semantics"""
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    STRING = "string"
    UNKNOWN = "unknown"


class Dataset(BaseModel):
    """Parsed table: ordered rows plus ordered column names"""
    rows: List[Row] = Field(default_factory=list, description="Rows")
    columns: List[str] = Field(default_factory=list, description="Column names")

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def derive_columns(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("columns") and data.get("rows"):
            seen: Dict[str, None] = {}
            for row in data["rows"]:
                if isinstance(row, dict):
                    for key in row:
                        seen.setdefault(key, None)
            data = {**data, "columns": list(seen)}
        return data

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @classmethod
    def from_dataframe(cls, df) -> "Dataset":
        """
        Build a dataset from an already-parsed pandas DataFrame.

        NaN/NaT become None, numpy scalars become Python scalars and
        timestamps become ISO date strings.
        """
        columns = [str(c) for c in df.columns]
        rows = []
        for record in df.to_dict(orient="records"):
            rows.append({str(k): _to_cell(v) for k, v in record.items()})
        return cls(rows=rows, columns=columns)


def _to_cell(value: Any) -> CellValue:
    if value is None:
        return None
    if isinstance(value, (list, tuple, dict, set)):
        return str(value)
    if pd.isna(value):
        return None
    if isinstance(value, datetime):
        if value.time() == time.min:
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


class MissingValueInfo(BaseModel):
    """Missing values for one column"""
    count: int = Field(..., ge=0, description="Missing cell count")
    percentage: float = Field(..., ge=0.0, description="Share of rows, percent")


class DatasetProfile(BaseModel):
    """Column-level overview of a dataset"""
    row_count: int = Field(..., ge=0, description="Row count")
    column_count: int = Field(..., ge=0, description="Column count")
    column_types: Dict[str, ColumnType] = Field(default_factory=dict, description="Inferred types")
    numeric_columns: List[str] = Field(default_factory=list, description="Columns of type number")
    date_columns: List[str] = Field(default_factory=list, description="Columns holding dates")
    missing_values: Dict[str, MissingValueInfo] = Field(default_factory=dict, description="Missing values per column")
