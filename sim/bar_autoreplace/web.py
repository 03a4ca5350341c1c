"""
BAR Unit AutoReplace - Web API
================================
FastAPI server for replaying scenarios over HTTP.

Usage:
    python -m bar_autoreplace.web
    python cli.py web [--port 8080]
"""

from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
import uvicorn
import yaml

from bar_autoreplace.io import load_scenario, parse_scenario, result_to_dict
from bar_autoreplace.models import CMD
from bar_autoreplace.replay import replay
from bar_autoreplace.strategies import STRATEGIES

# Paths
DATA_DIR = Path(__file__).parent.parent / "data"
SCENARIOS_DIR = DATA_DIR / "scenarios"

app = FastAPI(title="BAR Unit AutoReplace")


# ---------------------------------------------------------------------------
# Pydantic models for request/response
# ---------------------------------------------------------------------------

class ReplayRequest(BaseModel):
    scenario: Optional[dict[str, Any]] = None
    filename: Optional[str] = None
    strategies: Optional[list[str]] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _scenario_path(filename: str) -> Path:
    filepath = (SCENARIOS_DIR / filename).resolve()
    if SCENARIOS_DIR.resolve() not in filepath.parents or not filepath.exists():
        raise HTTPException(404, f"Scenario not found: {filename}")
    return filepath


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------

@app.get("/api/commands")
def api_commands():
    """Command ids understood in scenario files."""
    return {
        "commands": {c.name: int(c) for c in CMD},
        "strategies": list(STRATEGIES.keys()),
    }


@app.get("/api/scenarios")
def api_scenarios():
    """List saved YAML scenarios."""
    files = []
    if SCENARIOS_DIR.exists():
        for f in sorted(SCENARIOS_DIR.glob("*.yaml")):
            files.append({"filename": f.name, "stem": f.stem})
    return {"scenarios": files}


@app.get("/api/scenarios/{filename}")
def api_scenario_detail(filename: str):
    """Raw contents of a scenario file."""
    filepath = _scenario_path(filename)
    with open(filepath, "r") as f:
        return yaml.safe_load(f)


@app.post("/api/replay")
def api_replay(req: ReplayRequest):
    """Replay a scenario and return issued orders, echoes and final tables."""
    try:
        if req.filename:
            scenario = load_scenario(str(_scenario_path(req.filename)))
        elif req.scenario is not None:
            scenario = parse_scenario(req.scenario)
        else:
            raise HTTPException(400, "Provide either scenario or filename")

        if req.strategies is not None:
            scenario.config.strategies = list(req.strategies)
        result = replay(scenario)
    except (ValueError, yaml.YAMLError) as e:
        raise HTTPException(400, f"Bad scenario: {e}")
    return result_to_dict(result)


def start_server(port: int = 8080):
    """Start the uvicorn server."""
    print(f"Starting BAR Unit AutoReplace at http://localhost:{port}")
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")


if __name__ == "__main__":
    start_server()
