"""
Tests for the vaccine reservation scheduler.

Run tests with:
    python -m pytest tests/ -v
"""
