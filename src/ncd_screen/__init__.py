"""NCD Screen - community health screening risk engine.

Converts a structured patient profile into a CBAC risk score and a
prioritized list of screening recommendations.
"""

__version__ = "0.1.0"
