"""Runtime entry points: session controller, fetch workers, and event loop."""

from __future__ import annotations


def run_review(*args, **kwargs):
    """Lazily import the session bootstrap to keep package import light."""
    from .app import run_review as _run_review

    return _run_review(*args, **kwargs)


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


__all__ = ["run_main_loop", "run_review"]
