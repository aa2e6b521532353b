import logging
from typing import Optional

from fastapi import FastAPI, UploadFile, File, HTTPException
from .models import DecodeResponse, HealthResponse, SampleResponse, TableResponse
from .decode import HeaderKeyCollisionError, decode_csv_bytes, table_rows
from .fixtures import sample_result
from .rules import ALLOWED_SUFFIX, MISSING_PLACEHOLDER, STRICT_HEADERS

logger = logging.getLogger(__name__)

app = FastAPI(
    title="startup-csv",
    description="Decode uploaded startup CSV files into header names and records",
    version="0.1.0",
)


async def _decode_upload(file: UploadFile, strict: Optional[bool]) -> dict:
    if not (file.filename or "").lower().endswith(ALLOWED_SUFFIX):
        logger.info("rejected upload %r: not a CSV file", file.filename)
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read()
    try:
        return decode_csv_bytes(raw, strict=STRICT_HEADERS if strict is None else strict)
    except HeaderKeyCollisionError as exc:
        logger.info("rejected upload %r: %s", file.filename, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/decode", response_model=DecodeResponse)
async def decode_csv(file: UploadFile = File(...), strict: Optional[bool] = None):
    return await _decode_upload(file, strict)


@app.post("/table", response_model=TableResponse)
async def decode_csv_table(
    file: UploadFile = File(...),
    strict: Optional[bool] = None,
    placeholder: str = MISSING_PLACEHOLDER,
):
    decoded = await _decode_upload(file, strict)
    result = decoded["result"]
    return {
        "headers": result["headers"],
        "rows": table_rows(result["keys"], result["records"], placeholder),
        "placeholder": placeholder,
    }


@app.get("/sample", response_model=SampleResponse)
def sample():
    return {"result": sample_result()}
