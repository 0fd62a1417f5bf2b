from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .injector import instrument_source
from .pipeline import check_replaceable_target, run_pipeline

app = FastAPI(title="Log Injector (Java ServiceImpl -> structured logging)")


class PreviewReq(BaseModel):
    code: str
    filename: Optional[str] = None


class PreviewResp(BaseModel):
    filename: str
    changed: bool
    code: str
    loggers_added: List[str] = []
    instrumented: List[Dict[str, Any]] = []
    skipped: List[Dict[str, Any]] = []


class InstrumentReq(BaseModel):
    original: str = Field(min_length=1, description="Original Maven project directory")
    target: str = Field(min_length=1, description="Destination directory (empty, missing, or an earlier output)")


@app.get("/api/health")
def health():
    return {"ok": True}


@app.post("/api/preview", response_model=PreviewResp)
def preview(req: PreviewReq):
    filename = req.filename or "Preview.java"
    try:
        result = instrument_source(req.code, filename)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return PreviewResp(
        filename=filename,
        changed=result.changed,
        code=result.code,
        loggers_added=result.loggers_added,
        instrumented=result.instrumented,
        skipped=result.skipped,
    )


@app.post("/api/instrument")
def instrument(req: InstrumentReq):
    try:
        check_replaceable_target(req.target)
        return run_pipeline(req.original, req.target)
    except (FileNotFoundError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (OSError, RuntimeError) as e:
        raise HTTPException(status_code=500, detail=str(e))
