from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from .rules import MISSING_PLACEHOLDER


class Record(BaseModel):
    id: str
    values: Dict[str, str] = Field(default_factory=dict)


class DecodeResult(BaseModel):
    headers: List[str] = Field(default_factory=list)
    keys: List[str] = Field(default_factory=list)
    records: List[Record] = Field(default_factory=list)


class ReportSummary(BaseModel):
    rows: int = 0
    columns: int = 0
    warnings: int = 0
    strict: bool = False


class ReportItem(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class DecodeReport(BaseModel):
    summary: ReportSummary
    encoding: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[ReportItem] = Field(default_factory=list)


class DecodeResponse(BaseModel):
    result: DecodeResult
    report: DecodeReport


class SampleResponse(BaseModel):
    result: DecodeResult


class TableResponse(BaseModel):
    headers: List[str] = Field(default_factory=list)
    rows: List[List[str]] = Field(default_factory=list)
    placeholder: str = MISSING_PLACEHOLDER


class HealthResponse(BaseModel):
    ok: bool = True
