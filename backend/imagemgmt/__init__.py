"""
Image management: rampup-aware version resolution for containerized dispatch.
"""
__version__ = "1.0.0"
