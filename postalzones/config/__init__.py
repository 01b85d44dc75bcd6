"""
Run configuration and output path layout.
"""
