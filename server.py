from typing import Any, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

import config
from agent.auto import EmptyPlanError, run_auto_agent

app = FastAPI(title="AI Browser Agent")
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    return {"ok": True}


@app.post("/agent")
async def agent_endpoint(payload: Dict[str, Any]):
    prompt = payload.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        return JSONResponse(status_code=400, content={"error": "No prompt provided"})

    try:
        result = await run_auto_agent(prompt)
    except EmptyPlanError:
        return JSONResponse(status_code=500, content={"error": "AI returned no valid actions"})
    except Exception:
        logger.exception("Execution failed")
        return JSONResponse(status_code=500, content={"error": "Execution failed"})

    return {"success": True, "actions": result["actions"]}
