#!/usr/bin/env python3
"""Launch the frame stopwatch API server.

Usage:
    python run.py                          # Start API on 127.0.0.1:8000
    python run.py --port 8080              # Custom API port
    python run.py --config stopwatch.yaml  # Load settings from YAML
"""

import argparse
import logging
import os
import socket
import subprocess
import sys

_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))

logger = logging.getLogger("frame_stopwatch.run")


def _port_in_use(host: str, port: int) -> bool:
    """Return True if *host:port* is already bound."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
            return False
        except OSError:
            return True


def main():
    parser = argparse.ArgumentParser(description="Frame Stopwatch Launcher")
    parser.add_argument(
        "--port", type=int, default=8000, help="API server port (default: 8000)"
    )
    parser.add_argument(
        "--host", type=str, default="127.0.0.1", help="API server host (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--config", type=str, default=None, help="YAML config file (sets FRAME_STOPWATCH_CONFIG)"
    )
    parser.add_argument(
        "--log-level", type=str, default="info", choices=["debug", "info", "warning", "error"]
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Subprocess environment: add src/ to PYTHONPATH so frame_stopwatch is
    # importable without pip install.
    env = os.environ.copy()
    src_dir = os.path.join(_PROJECT_ROOT, "src")
    env["PYTHONPATH"] = src_dir + os.pathsep + env.get("PYTHONPATH", "")
    if args.config:
        env["FRAME_STOPWATCH_CONFIG"] = os.path.abspath(args.config)

    if _port_in_use(args.host, args.port):
        logger.error(
            "Port %d is already in use. Kill the other process or run: python run.py --port %d",
            args.port,
            args.port + 1,
        )
        sys.exit(1)

    api_cmd = [
        sys.executable, "-m", "uvicorn",
        "frame_stopwatch.main:app",
        "--host", args.host,
        "--port", str(args.port),
        "--log-level", args.log_level,
    ]
    logger.info("Starting API server on http://%s:%d", args.host, args.port)
    logger.info("Interactive docs: http://%s:%d/docs", args.host, args.port)
    api_proc = subprocess.Popen(api_cmd, env=env, cwd=_PROJECT_ROOT)

    try:
        sys.exit(api_proc.wait())
    except KeyboardInterrupt:
        api_proc.terminate()
        try:
            api_proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            api_proc.kill()


if __name__ == "__main__":
    main()
