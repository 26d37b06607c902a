"""HTTP API for the simulator."""

from sandlot.api.main import create_app, run_api

__all__ = ["create_app", "run_api"]
