"""Entry point for the document rendering server."""

import argparse
import os

import uvicorn

from resume_render_server.logger import logger


def main():
    parser = argparse.ArgumentParser(description="Resume render server")
    parser.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Minimum log level. Overrides LOG_LEVEL env var.",
    )
    parser.add_argument(
        "--max-document-chars",
        type=int,
        default=None,
        help="Longest accepted document text. Overrides MAX_DOCUMENT_CHARS env var.",
    )
    args = parser.parse_args()

    if args.log_level:
        logger.set_level(args.log_level)
    if args.max_document_chars:
        os.environ["MAX_DOCUMENT_CHARS"] = str(args.max_document_chars)

    from resume_render_server.server import app

    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
