#!/usr/bin/env python
"""
Run the rate calculator HTTP API under uvicorn.

Usage:
    python scripts/run_api.py [--host HOST] [--port PORT] [--data-dir DIR] [--no-reload]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Run the freelance rate calculator API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--data-dir", help="Directory for the persisted calculation history")
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload on code changes")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent

    env = os.environ.copy()
    env['PYTHONPATH'] = os.pathsep.join(filter(None, [str(project_root / 'src'), env.get('PYTHONPATH')]))
    if args.data_dir:
        env['FREELANCE_RATES_DATA_DIR'] = str(Path(args.data_dir).resolve())

    # create_app is a factory: each worker builds its own history and rate provider
    cmd = [
        sys.executable, '-m', 'uvicorn', 'freelance_rates.api.main:create_app', '--factory',
        '--host', args.host, '--port', str(args.port),
    ]
    if not args.no_reload:
        cmd.append('--reload')
    print(f"Starting API: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
