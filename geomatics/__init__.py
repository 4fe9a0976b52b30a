"""
Geomatics coordinate engine.
Extracts ordered coordinate lists from GML curve and surface geometries.
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
