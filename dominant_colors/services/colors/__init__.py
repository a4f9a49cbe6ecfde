"""
Dominant Colors - Colors Module

K-means palette extraction: pixel sampling, K-means++ seeding, Lloyd
iterations with convergence detection, dominance-ranked results, plus
derived color utilities and swatch rendering.
"""

__version__ = "1.0.0"
