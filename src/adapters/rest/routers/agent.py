"""Conversational agent endpoint."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from agent.executor import AgentExecutor
from domain.exceptions import ValidationError
from adapters.rest.dependencies import get_agent
from adapters.rest.schemas import AgentBody

router = APIRouter(prefix="/api/agent", tags=["agent"])


@router.post("")
async def run_agent(
    body: AgentBody,
    agent: AgentExecutor = Depends(get_agent),
):
    result = await agent.run_turn(body.prompt)
    if result.success:
        return result.to_dict()
    status_code = 400 if result.error_kind == ValidationError.kind else 500
    return JSONResponse(status_code=status_code, content=result.to_dict())
