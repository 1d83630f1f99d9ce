"""Command line launcher: ``python -m bookstore`` or ``bookstore``."""

import argparse

import uvicorn

from bookstore import create_app


def main() -> None:
    """Serve the bookstore API with uvicorn."""
    parser = argparse.ArgumentParser(
        prog="bookstore",
        description="Serve the bookstore REST API.",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="File of KEY=value settings loaded before reading the environment.",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    parser.add_argument("--port", type=int, default=3000, help="TCP port to listen on.")
    options = parser.parse_args()

    uvicorn.run(create_app(options.env_file), host=options.host, port=options.port)


if __name__ == "__main__":
    main()
