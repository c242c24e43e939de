"""Prototype Cache Test Suite.

This package contains unit tests for the prototype-cache project.

Test Structure:
- unit/: Unit tests for individual functions and classes
"""

__version__ = "0.1.0"
