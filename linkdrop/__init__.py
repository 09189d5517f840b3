"""
linkdrop: short-code link catalogue with asynchronous metadata enrichment.
"""

__version__ = "0.1.0"
