"""
Distance units and the calculators a spatial context measures with.
"""
