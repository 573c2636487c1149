"""
Spatial context: distance unit, calculator and world bounds, plus the factory that builds it.
"""
