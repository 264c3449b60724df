"""
Launcher script tests: the command line handed to uvicorn.
"""
import importlib.util
import os
from pathlib import Path

import pytest

SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"


@pytest.fixture
def run_api():
    spec = importlib.util.spec_from_file_location("run_api", SCRIPTS_DIR / "run_api.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def captured(monkeypatch, run_api):
    calls = []
    monkeypatch.setattr(run_api.subprocess, "run", lambda cmd, **kwargs: calls.append((cmd, kwargs)))
    return calls


def test_api_launcher_defaults(monkeypatch, run_api, captured):
    monkeypatch.setattr("sys.argv", ["run_api.py"])
    run_api.main()

    cmd, kwargs = captured[0]
    assert cmd[1:] == [
        "-m", "uvicorn", "freelance_rates.api.main:create_app", "--factory",
        "--host", "0.0.0.0", "--port", "8000", "--reload",
    ]
    assert kwargs["env"]["PYTHONPATH"].split(os.pathsep)[0].endswith("src")


def test_api_launcher_options(monkeypatch, tmp_path, run_api, captured):
    monkeypatch.setattr("sys.argv", [
        "run_api.py", "--host", "127.0.0.1", "--port", "9001", "--data-dir", str(tmp_path), "--no-reload",
    ])
    run_api.main()

    cmd, kwargs = captured[0]
    assert cmd[-4:] == ["--host", "127.0.0.1", "--port", "9001"]
    assert "--reload" not in cmd
    assert kwargs["env"]["FREELANCE_RATES_DATA_DIR"] == str(tmp_path.resolve())
