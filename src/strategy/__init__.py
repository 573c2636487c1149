"""
WKB field strategy: bounded-size encoding for writes, predicate filters for reads.
"""
