"""
TopMetric trending-result post-processing.
"""
__version__ = "0.1.0"
