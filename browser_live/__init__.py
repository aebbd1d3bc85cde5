"""
Browser Use Live - run browser automation tasks in the cloud and watch them live.

This package exposes Browser Use Cloud tasks to an AI assistant host over MCP
and publishes task status over HTTP for the live-view widget.
"""

__version__ = "1.0.0"
