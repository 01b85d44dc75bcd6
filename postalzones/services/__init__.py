"""
Shared services: logging.
"""
