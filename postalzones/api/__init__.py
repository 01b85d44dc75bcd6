"""
HTTP API serving pipeline artifacts to the map client.
"""
