import asyncio
import sys

import uvicorn
from loguru import logger

import config
from agent.auto import run_auto_agent


def run_goal(instruction: str):
    result = asyncio.run(run_auto_agent(instruction))
    for i, action in enumerate(result["actions"]):
        logger.info(f"{i}: {action}")
    return result


def run():
    config.setup_logging()
    if len(sys.argv) > 1:
        run_goal(" ".join(sys.argv[1:]))
        return
    logger.info(f"AI Browser Agent running on http://{config.get_host()}:{config.get_port()}")
    uvicorn.run("server:app", host=config.get_host(), port=config.get_port())


if __name__ == "__main__":
    run()
