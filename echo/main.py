# echo/main.py
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .config import settings

logger = logging.getLogger(__name__)

SUBMIT_ACK = "Data submitted!"


def create_app() -> FastAPI:
    app = FastAPI(title="echo")

    @app.get("/")
    async def echo_request(request: Request):
        url = request.url.path
        if request.url.query:
            url += "?" + request.url.query
        return {"url": url, "method": request.method}

    # Body is never read.
    @app.post("/submit", response_class=PlainTextResponse)
    async def submit():
        return SUBMIT_ACK

    return app


app = create_app()


def run():
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.info("Server running on http://localhost:%s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
