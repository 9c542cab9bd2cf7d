"""
Prompt Discipline - FastAPI Server

Serves prompt triage and session scorecards to local tooling.
"""

import argparse

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prompt_discipline import __version__

from .routes import scorecard, triage

app = FastAPI(
    title="Prompt Discipline",
    description="Prompt triage and session scorecards",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(triage.router, prefix="/api", tags=["triage"])
app.include_router(scorecard.router, prefix="/api", tags=["scorecard"])


@app.get("/health")
def health():
    """Health check endpoint"""
    return {"status": "ok"}


@app.get("/")
def root():
    """Root endpoint with API info"""
    return {
        "name": "Prompt Discipline",
        "version": __version__,
        "docs": "/docs",
    }


def build_log_config() -> dict:
    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["access"]["fmt"] = "%(asctime)s %(levelprefix)s %(client_addr)s - \"%(request_line)s\" %(status_code)s"
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s %(levelprefix)s %(message)s"
    log_config["formatters"]["access"]["datefmt"] = "%H:%M:%S"
    log_config["formatters"]["default"]["datefmt"] = "%H:%M:%S"
    return log_config


def serve(host: str = "127.0.0.1", port: int = 9877) -> None:
    print(f"Starting Prompt Discipline server on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info", log_config=build_log_config())


def main():
    """Main entry point for the server"""
    parser = argparse.ArgumentParser(description="Prompt Discipline Server")
    parser.add_argument(
        "--port",
        type=int,
        default=9877,
        help="Port to run the server on (default: 9877)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    args = parser.parse_args()
    serve(args.host, args.port)


if __name__ == "__main__":
    main()
