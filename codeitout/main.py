import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from codeitout.config import Config, logger
from codeitout.data.repositories import init_db
from codeitout.data.repositories.judge_client import judge_client
from codeitout.errors import register_exception_handlers
from codeitout.presentation.middleware.request_logging import LoggingMiddleware
from codeitout.presentation.routes import auth_router, problem_router


@asynccontextmanager
async def life_span(app: FastAPI):
    logger.info("Server is starting...")
    if os.environ.get("TESTING") != "True":
        try:
            await init_db()
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise
    else:
        logger.info("Skipping database initialization for tests")
    yield
    await judge_client.aclose()
    logger.info("Server has been stopped")


version = "v1"

app = FastAPI(
    title="Codeitout API",
    description="Authentication and judge-validated coding problem authoring",
    version=version,
    lifespan=life_span,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LoggingMiddleware)

register_exception_handlers(app)

app.include_router(auth_router, prefix=f"/api/{version}", tags=["auth"])
app.include_router(problem_router, prefix=f"/api/{version}", tags=["problems"])


@app.get("/", include_in_schema=False)
async def root():
    return {"message": "Welcome to codeitout"}


logger.info(f"Application startup complete - API version: {version}")


def run():
    uvicorn.run("codeitout.main:app", host=Config.HOST, port=Config.PORT)


if __name__ == "__main__":
    run()
