"""CLI entry point for the SpecPilot API server."""

import argparse
import os

from specpilot.config import settings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="specpilot-server",
        description="SpecPilot API server",
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind host (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Bind port (default: {settings.port})")
    parser.add_argument(
        "--memory",
        action="store_true",
        help="Keep specs and integration settings in process memory only",
    )
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    args = parser.parse_args(argv)

    if args.memory:
        # Env var covers the reloader subprocess
        os.environ["SPECPILOT_STORE_BACKEND"] = "memory"
        settings.store_backend = "memory"

    import uvicorn

    uvicorn.run("specpilot.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
