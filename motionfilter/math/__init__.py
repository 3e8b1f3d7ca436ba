r"""
    Math utils used by the filters.
"""

from .general import *
from .angular import *
