"""
RiesTeX HTTP API.

Run with:
    uvicorn backend.app.main:app --reload
"""
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from riestex import __version__
from riestex.config import configure_logging, settings
from riestex.engine import tokens_to_latex
from riestex.highlight import highlight_difference, solved_value_markup
from riestex.output import equations_for_zero_target, is_zero_target, parse_solver_output

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="RiesTeX API", version=__version__, debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ConvertRequest(BaseModel):
    tokens: str


class LatexResponse(BaseModel):
    latex: str


class ParseRequest(BaseModel):
    output: str = ""
    target: Optional[str] = None
    decimals: Optional[int] = None


class EquationInfo(BaseModel):
    lhs: str
    rhs: str
    offset: str
    x: Optional[str] = None


class ParseResponse(BaseModel):
    equations: list[EquationInfo]


class HighlightRequest(BaseModel):
    target: str
    computed: str


@app.get("/health")
def health():
    return {"status": "ok", "version": __version__}


@app.post("/api/convert", response_model=LatexResponse)
def convert(req: ConvertRequest):
    tokens = req.tokens.strip()
    if not tokens:
        raise HTTPException(status_code=400, detail="Expression cannot be empty.")

    try:
        latex = tokens_to_latex(tokens)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("convert failed for %r", tokens)
        raise HTTPException(status_code=500, detail=f"Converter error: {str(e)}")

    return {"latex": latex}


@app.post("/api/parse", response_model=ParseResponse)
def parse(req: ParseRequest):
    target = (req.target or "").strip()
    if target and is_zero_target(target):
        records = equations_for_zero_target()
    elif not req.output.strip():
        raise HTTPException(status_code=400, detail="Solver output cannot be empty.")
    else:
        try:
            records = parse_solver_output(req.output)
        except Exception as e:
            logger.exception("parse failed")
            raise HTTPException(status_code=500, detail=f"Parser error: {str(e)}")

    equations = []
    for rec in records:
        item = rec.as_dict()
        if target:
            item["x"] = solved_value_markup(target, rec.offset, req.decimals)
        equations.append(item)
    return {"equations": equations}


@app.post("/api/highlight", response_model=LatexResponse)
def highlight(req: HighlightRequest):
    return {"latex": highlight_difference(req.target.strip(), req.computed.strip())}
