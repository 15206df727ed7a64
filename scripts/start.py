#!/usr/bin/env python3
"""
Production startup script.

Validates PORT and WEB_CONCURRENCY, then replaces this process with gunicorn serving app.wsgi:app.

Usage (container run command):
    python scripts/start.py
"""

from __future__ import annotations

import os
import sys


def resolve_port(raw: str | None) -> int:
    port = (raw or "").strip()
    if not port:
        print("WARNING: PORT not set, using default 8080", flush=True)
        port = "8080"
    port_int = int(port)
    if port_int < 1 or port_int > 65535:
        raise ValueError("Port out of range")
    return port_int


def resolve_workers(raw: str | None) -> int:
    workers = (raw or "").strip() or "2"
    workers_int = int(workers)
    if workers_int < 1:
        raise ValueError("Worker count must be positive")
    return workers_int


def gunicorn_argv(port: int, workers: int = 2) -> list[str]:
    return [
        "gunicorn",
        "app.wsgi:app",
        "--bind", f"0.0.0.0:{port}",
        "--workers", str(workers),
        "--timeout", "30",
        "--preload",
        "--access-logfile", "-",
        "--error-logfile", "-",
    ]


def main() -> None:
    try:
        port = resolve_port(os.environ.get("PORT"))
    except ValueError:
        print(f"ERROR: Invalid PORT value '{os.environ.get('PORT')}'. Must be integer 1-65535.", flush=True)
        sys.exit(1)

    try:
        workers = resolve_workers(os.environ.get("WEB_CONCURRENCY"))
    except ValueError:
        print(f"ERROR: Invalid WEB_CONCURRENCY value '{os.environ.get('WEB_CONCURRENCY')}'. Must be a positive integer.", flush=True)
        sys.exit(1)
    print(f"=== Starting gunicorn on 0.0.0.0:{port} ({workers} workers) ===", flush=True)
    print("Health check endpoint ready at /healthz", flush=True)

    # exec so gunicorn becomes PID 1 and receives signals directly
    os.execvp("gunicorn", gunicorn_argv(port, workers))


if __name__ == "__main__":
    main()
