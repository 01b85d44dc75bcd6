"""
Processing pipelines for postal zone geometry.
"""
