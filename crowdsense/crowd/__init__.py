"""
Crowd module: report aggregation, formatting and the HTTP surface.
"""
