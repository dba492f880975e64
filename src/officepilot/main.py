from fastapi import FastAPI

from officepilot import __version__
from officepilot.config import get_config
from officepilot.logger import get_logger
from officepilot.routers import deployments_api as deployments_router

logger = get_logger(__name__)

app = FastAPI(title="OfficePilot", version=__version__)


@app.get("/api/health", operation_id="health_api_health_get")
async def health_get() -> dict[str, str]:
    """Liveness check for service monitors; reports the running version."""
    return {"status": "ok", "version": __version__}


# Register routers
app.include_router(deployments_router.router)


def run_server(port: int | None = None) -> None:
    """Run the OfficePilot API server.

    Args:
        port: Optional port number to override config for this run.
    """
    import uvicorn

    config = get_config()
    if port is not None:
        config.server.port = port

    logger.info("Starting server", host=config.server.host, port=config.server.port)
    uvicorn.run(app, host=config.server.host, port=config.server.port)


def main() -> None:
    """Main entry point with CLI argument parsing."""
    import argparse

    parser = argparse.ArgumentParser(
        description="OfficePilot - desired-state Office deployment planner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  officepilot                  # Start with the configured port
  officepilot --port 9000      # Start on port 9000
        """,
    )

    parser.add_argument(
        "--port",
        type=int,
        metavar="PORT",
        help="Port number to run the server on",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"OfficePilot {__version__}",
    )

    args = parser.parse_args()

    run_server(port=args.port)


if __name__ == "__main__":
    main()
