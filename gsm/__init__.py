"""GSM - GSocket Manager.

Terminal front-end for saving, organising and launching gsocket connections.
"""

__version__ = "1.0.0"
