"""
CX Engine
=========

Offline text analytics for customer feedback: keyword sentiment, root-cause
clustering, NPS and alert rules.
"""

__version__ = "0.1.0"
