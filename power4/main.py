import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from power4 import config
from power4.log import configure_logging, log_requests
from power4.models import ErrorResponse, HealthResponse
from power4.routes import attach_session_cookie, router
from power4.session import Power4Error

logger = logging.getLogger(__name__)

configure_logging(config.LOG_LEVEL)

app = FastAPI(title="Power4 Server")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(attach_session_cookie)
app.middleware("http")(log_requests)


app.include_router(router)


@app.exception_handler(Power4Error)
async def power4_error_handler(request: Request, exc: Power4Error):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=exc.message).model_dump(),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(message="Internal server error").model_dump(),
    )


@app.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "ok"}


def run():
    logger.info("Listening on %s:%d", config.HOST, config.PORT)
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_config=None)


if __name__ == "__main__":
    run()
