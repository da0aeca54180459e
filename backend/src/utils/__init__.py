"""
Utility modules for the drawing bridge.

This package contains shared helper functions, including nested dict
access, datetime utilities and structural validation of imported elements
and layers.
"""
