# app.py
# Flask routes for allocating, listing and freeing native memory blocks

import logging
import re

from flask import Flask, current_app

from .allocator import MIB, SIZE_MAX, AllocationError
from .registry import Registry

logger = logging.getLogger(__name__)

DEFAULT_GREETING = "a multi-colored shine on all surfaces"
ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

_AMOUNT = re.compile(r"\+?[0-9]+")
MAX_AMOUNT_DIGITS = len(str(SIZE_MAX // MIB))


def _text(body, status=200):
    return body, status, {"Content-Type": "text/plain; charset=utf-8"}


def _registry() -> Registry:
    return current_app.extensions["memory_registry"]


def create_app(greeting=None, registry=None):
    app = Flask(__name__)
    app.config["GREETING"] = greeting if greeting is not None else DEFAULT_GREETING
    app.extensions["memory_registry"] = registry if registry is not None else Registry()

    @app.route('/', methods=ANY_METHOD)
    def root():
        return _text(current_app.config["GREETING"])

    @app.route('/health', methods=ANY_METHOD)
    def health():
        return _text("OK")

    @app.route('/allocate/<amount>', methods=["GET"])
    def allocate(amount):
        if not _AMOUNT.fullmatch(amount):
            # A rejected request still consumes an id.
            skipped = _registry().next_id()
            logger.warning(f"rejected amount {amount!r}, id {skipped} skipped")
            return _text("Invalid argument, amount should be an integer", 400)

        digits = amount.lstrip("+").lstrip("0")
        if len(digits) > MAX_AMOUNT_DIGITS:
            # Larger than any request malloc could take; int() may refuse it too.
            _registry().next_id()
            raise AllocationError(amount)

        allocation_id = _registry().allocate(int(digits or "0"))
        return _text(allocation_id)

    @app.route('/deallocate/<allocation_id>', methods=["GET"])
    def deallocate(allocation_id):
        if _registry().deallocate(allocation_id):
            return _text("OK")
        return _text("not found", 404)

    @app.route('/clear', methods=ANY_METHOD)
    def clear():
        removed = _registry().clear()
        logger.info(f"cleared {removed} allocations")
        return _text("OK")

    @app.route('/allocations', methods=ANY_METHOD)
    def allocations():
        total = 0
        lines = []
        for allocation_id, size in _registry().snapshot():
            total += size
            lines.append(f"{allocation_id} => {size}\n")
        lines.append(f"total {total}\n")
        return _text("".join(lines))

    @app.errorhandler(AllocationError)
    def allocation_failed(error):
        logger.error(f"allocation failed: {error}")
        return _text("allocation failed", 500)

    return app
