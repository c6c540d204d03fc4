#!/usr/bin/env python
"""
Run the Team Pricing API (FastAPI + uvicorn).

Usage:
    python scripts/run_api.py [--port 8000] [--no-reload]

Set TEAM_PRICING_DATA_DIR to serve items from another directory.
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Run the Team Pricing API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-reload", action="store_true")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent

    # Ensure src is importable without an install
    env = os.environ.copy()
    src_path = str(project_root / "src")
    env["PYTHONPATH"] = os.pathsep.join(p for p in (src_path, env.get("PYTHONPATH")) if p)

    cmd = [
        sys.executable, "-m", "uvicorn", "team_pricing.api.main:app",
        "--host", args.host, "--port", str(args.port),
    ]
    if not args.no_reload:
        cmd.append("--reload")

    print(f"Starting Team Pricing API: {' '.join(cmd)}")
    try:
        subprocess.run(cmd, env=env, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
