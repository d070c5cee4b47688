"""
Presentation layer for the Crowd module.
"""
