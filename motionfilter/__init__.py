r"""
    Recursive low-pass filters for scalar, vector3 and orientation signals.
"""

from . import math
from .filter import *
