"""Sanogenic Lab — dev launcher. Starts the API server or the MCP server."""

import argparse
import os
import signal
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
BACKEND_PORT = os.getenv("BACKEND_PORT", "13013")


def main():
    parser = argparse.ArgumentParser(description="Sanogenic Lab dev launcher")
    parser.add_argument("--mcp", action="store_true",
                        help="Run the MCP server on stdio instead of the HTTP API")
    parser.add_argument("--check", action="store_true",
                        help="Report whether GEMINI_API_KEY is configured and exit")
    args = parser.parse_args()

    if args.check:
        from sanogen.credentials import credential_status
        status = credential_status()
        if status["configured"]:
            print(f"GEMINI_API_KEY configured: {status['masked']}")
            sys.exit(0)
        print(f"GEMINI_API_KEY problem: {status['problem']}")
        sys.exit(1)

    if args.mcp:
        from backend.mcp_server import mcp
        mcp.run()
        return

    procs: list[subprocess.Popen] = []

    def shutdown(*_):
        print("\nShutting down...")
        for p in procs:
            p.terminate()
        for p in procs:
            p.wait()
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    print(f"Starting backend on http://localhost:{BACKEND_PORT} ...")
    procs.append(subprocess.Popen(
        ["uv", "run", "uvicorn", "backend.app:app", "--reload", "--host", HOST, "--port", BACKEND_PORT],
        cwd=ROOT,
    ))

    for p in procs:
        p.wait()


if __name__ == "__main__":
    main()
