"""Audit trail of HTTP requests, one line per request in ``<log_dir>/<service>.log``."""
from __future__ import annotations

import logging
from pathlib import Path
from time import perf_counter

from fastapi import FastAPI, Request

AUDIT_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def audit_logger(service_name: str, log_dir: Path) -> logging.Logger:
    """File logger for ``service_name``; handlers are attached once per name."""

    logger = logging.getLogger(f"roomboard.audit.{service_name}")
    if logger.handlers:
        return logger

    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / f"{service_name}.log", encoding="utf-8")
    handler.setFormatter(logging.Formatter(AUDIT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def _describe(request: Request) -> str:
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    client = request.client.host if request.client else "unknown"
    return f"{request.method} {target} | client={client}"


def add_audit_middleware(app: FastAPI, service_name: str, log_dir: Path) -> None:
    """Record every request; client and server errors are logged as warnings."""

    logger = audit_logger(service_name, log_dir)

    @app.middleware("http")
    async def audit(request: Request, call_next):  # type: ignore[override]
        started = perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "%s | status=500 | duration=%.2fms | unhandled",
                _describe(request),
                (perf_counter() - started) * 1000,
            )
            raise
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "%s | status=%s | duration=%.2fms",
            _describe(request),
            response.status_code,
            (perf_counter() - started) * 1000,
        )
        return response
