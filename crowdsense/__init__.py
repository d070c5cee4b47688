"""
CrowdSense - crowd-sourced congestion and wait-time estimates.
"""
__version__ = "0.1.0"
