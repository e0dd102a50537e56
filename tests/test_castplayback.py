"""Initial smoke test for castplayback package."""

import importlib


def test_can_import_castplayback():
    """Ensure the castplayback package can be imported."""
    module = importlib.import_module("castplayback")
    assert module is not None
