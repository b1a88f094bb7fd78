"""HTTP API package."""

from splitter.api.app import create_app, run_server

__all__ = ["create_app", "run_server"]
