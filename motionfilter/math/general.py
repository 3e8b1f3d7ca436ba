r"""
    General math utils.
"""


__all__ = ['lerp', 'copy_value', 'zero_vector3']


import numpy as np
import torch


def lerp(a, b, t):
    r"""
    Linear interpolation (unclamped).

    Works for any type with vector space semantics, e.g., float, numpy array or torch tensor.

    :param a: Begin value.
    :param b: End value.
    :param t: Lerp weight. t = 0 will return a; t = 1 will return b.
    :return: The linear interpolation value.
    """
    return a * (1 - t) + b * t


def copy_value(x):
    r"""
    Copy a mutable value (numpy array or torch tensor) so later in-place changes by the caller do not leak into it.
    Immutable values (float, quaternion scalar) are returned as is.

    :param x: Value of any type.
    :return: An independent copy of x.
    """
    if isinstance(x, torch.Tensor):
        return x.detach().clone()
    if isinstance(x, np.ndarray):
        return x.copy()
    return x


def zero_vector3():
    r"""
    Get a zero vector3. (numpy, single)

    :return: Zero vector in shape [3].
    """
    return np.zeros(3)
