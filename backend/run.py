"""
Start the HRMS API under uvicorn.

Host and port default to HOST / PORT from the environment (or .env).

Usage:
    python run.py
    python run.py --reload
    python run.py --port 8080 --workers 4
"""
import argparse
import uvicorn

from hrms.config.settings import settings


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the HRMS API server")
    parser.add_argument("--host", default=settings.host, help=f"bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"bind port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="restart on code changes")
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="worker processes; forced to 1 with --reload"
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    workers = 1 if args.reload else args.workers
    print(f"Starting HRMS API on {args.host}:{args.port} "
          f"(env={settings.environment}, workers={workers}, reload={args.reload})")

    uvicorn.run(
        "hrms.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=workers,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
