"""
Postal zone boundary preparation.

Trims raw postal polygons to a land or border outline, fills the gaps the trim
leaves behind, dissolves same-code fragments and derives label anchor points.
"""

__version__ = "1.0.0"
