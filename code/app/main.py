import logging
import os

import anyio
import anyio.to_thread
from fastapi import FastAPI, HTTPException

from app.core.models import (
    AnswerResponse,
    ProjectionRequest,
    ProjectionResponse,
    QuestionRequest,
    WhatIfRequest,
    WhatIfResponse,
)
from app.ai.advisor_client import check_advisor_online
from app.core.pipeline import answer_question, run_projection_analysis, run_what_if

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PROJECTION_TIMEOUT = float(os.getenv("PROJECTION_TIMEOUT", "10"))
ADVICE_TIMEOUT = float(os.getenv("ADVICE_TIMEOUT", "60"))

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Retirement Projection API")


async def _with_timeout(func, payload, timeout: float):
    try:
        with anyio.fail_after(timeout):
            # the worker thread is abandoned, not killed, when the deadline passes
            return await anyio.to_thread.run_sync(func, payload, abandon_on_cancel=True)
    except TimeoutError:
        logger.error("%s timed out after %.1fs", func.__name__, timeout)
        raise HTTPException(status_code=504, detail=f"{func.__name__} timed out") from None


@app.get("/health")
def health():
    return {"status": "ok", "advisorOnline": check_advisor_online()}


@app.post("/projection", response_model=ProjectionResponse)
async def projection(payload: ProjectionRequest):
    timeout = ADVICE_TIMEOUT if payload.include_advice else PROJECTION_TIMEOUT
    return await _with_timeout(run_projection_analysis, payload, timeout)


@app.post("/ask", response_model=AnswerResponse)
async def ask(payload: QuestionRequest):
    return await _with_timeout(answer_question, payload, ADVICE_TIMEOUT)


@app.post("/what-if", response_model=WhatIfResponse)
async def what_if(payload: WhatIfRequest):
    return await _with_timeout(run_what_if, payload, PROJECTION_TIMEOUT)
