# __main__.py
# Command-line entry point: parse the greeting, configure logging, serve

import argparse
import logging
import sys

from .app import create_app

logger = logging.getLogger("memory_server")


def greeting_from_arg(value):
    if value is None or value == "default":
        return None
    return value.upper()


def build_parser():
    parser = argparse.ArgumentParser(
        prog="memory-server",
        description="HTTP server that allocates and frees native memory on request.",
    )
    parser.add_argument(
        "greeting", nargs="?", default=None,
        help="Text served at / (upper-cased). 'default' keeps the built-in greeting.",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8080, help="Port to listen on (default: 8080)")
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    app = create_app(greeting=greeting_from_arg(args.greeting))
    try:
        # threaded=True serves each request on its own thread
        app.run(host=args.host, port=args.port, debug=False, threaded=True)
    except OSError as e:
        logger.error(f"could not listen on {args.host}:{args.port}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
