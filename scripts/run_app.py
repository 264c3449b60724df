#!/usr/bin/env python
"""
Run the Streamlit rate calculator.

Usage:
    python scripts/run_app.py [--data-dir DIR] [extra streamlit args...]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Run the freelance rate calculator UI")
    parser.add_argument("--data-dir", help="Directory for the persisted calculation history")
    args, streamlit_args = parser.parse_known_args()

    project_root = Path(__file__).parent.parent
    ui_path = project_root / 'src' / 'freelance_rates' / 'ui' / 'app_streamlit.py'

    if not ui_path.exists():
        print(f"ERROR: UI module not found at {ui_path}")
        sys.exit(1)

    env = os.environ.copy()
    if args.data_dir:
        env['FREELANCE_RATES_DATA_DIR'] = str(Path(args.data_dir).resolve())

    cmd = [sys.executable, '-m', 'streamlit', 'run', str(ui_path), *streamlit_args]
    print(f"Starting Streamlit: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nApplication stopped.")


if __name__ == "__main__":
    main()
