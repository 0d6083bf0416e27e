"""
varquery
Search facility over a live variable server registry.
"""

__version__ = "0.1.0"
__package_name__ = "varquery"
