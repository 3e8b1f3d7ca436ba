r"""
    Angular math utils. Orientations are represented by unit quaternions (numpy-quaternion).
"""


__all__ = ['identity_quaternion', 'is_quaternion', 'as_quaternion', 'quaternion_slerp', 'rotation_matrix_to_quaternion',
           'quaternion_to_rotation_matrix']


import numpy as np
import quaternion     # package: numpy-quaternion
import torch


def identity_quaternion():
    r"""
    Get the identity orientation.

    :return: Quaternion (1, 0, 0, 0) in wxyz.
    """
    return quaternion.quaternion(1, 0, 0, 0)


def is_quaternion(q):
    r"""
    Whether q is a numpy-quaternion quaternion or quaternion array.
    """
    return isinstance(q, quaternion.quaternion) or (isinstance(q, np.ndarray) and q.dtype == quaternion.quaternion)


def as_quaternion(q):
    r"""
    Convert an orientation to numpy-quaternion.

    :param q: A quaternion, a quaternion array, or wxyz values in shape [..., 4] (list, numpy array or torch tensor).
    :return: A quaternion if q is a single orientation, otherwise a quaternion array in shape [...].
    """
    if is_quaternion(q):
        return q
    if isinstance(q, torch.Tensor):
        q = q.detach().cpu().numpy()
    q = np.asarray(q, dtype=float)
    if q.shape[-1:] != (4,):
        raise ValueError('quaternion must be in shape [..., 4], got {}'.format(q.shape))
    if q.shape == (4,):
        return quaternion.quaternion(*q)
    return quaternion.as_quat_array(np.ascontiguousarray(q))


def _as_float_array(q):
    if isinstance(q, quaternion.quaternion):
        return q.components
    return quaternion.as_float_array(q)


def quaternion_slerp(q0, q1, t):
    r"""
    Spherical linear interpolation along the shortest arc.

    q1 is flipped to the hemisphere of q0 before interpolation, so the result does not take the long way around.
    The result is renormalized to unit norm.

    :param q0: Begin orientation (see `as_quaternion()` for the accepted types).
    :param q1: End orientation (see `as_quaternion()` for the accepted types).
    :param t: Slerp weight. t = 0 will return q0; t = 1 will return q1 (up to sign).
    :return: Unit quaternion, or quaternion array in the broadcast shape of q0 and q1.
    """
    q0, q1 = as_quaternion(q0), as_quaternion(q1)
    if isinstance(q0, quaternion.quaternion) and isinstance(q1, quaternion.quaternion):
        if np.dot(q0.components, q1.components) < 0:
            q1 = -q1
        q = quaternion.slerp_evaluate(q0, q1, t)
        return quaternion.quaternion(*_as_float_array(q)).normalized()

    f0, f1 = np.broadcast_arrays(_as_float_array(q0), _as_float_array(q1))
    f1 = f1 * np.where((f0 * f1).sum(axis=-1, keepdims=True) < 0, -1., 1.)
    q0 = quaternion.as_quat_array(np.ascontiguousarray(f0))
    q1 = quaternion.as_quat_array(np.ascontiguousarray(f1))
    f = quaternion.as_float_array(quaternion.np.slerp_vectorized(q0, q1, t))
    f = f / np.linalg.norm(f, axis=-1, keepdims=True)
    return quaternion.as_quat_array(np.ascontiguousarray(f))


def rotation_matrix_to_quaternion(R):
    r"""
    Convert rotation matrices to quaternions.

    :param R: Rotation matrices in shape [..., 3, 3] (numpy array or torch tensor). Slightly non-orthogonal
              matrices are accepted.
    :return: A quaternion for a single matrix, otherwise a quaternion array in shape [...].
    """
    if isinstance(R, torch.Tensor):
        R = R.detach().cpu().numpy()
    R = np.asarray(R, dtype=float)
    if R.shape[-2:] != (3, 3):
        raise ValueError('rotation matrix must be in shape [..., 3, 3], got {}'.format(R.shape))
    return as_quaternion(quaternion.as_float_array(quaternion.from_rotation_matrix(R, nonorthogonal=True)))


def quaternion_to_rotation_matrix(q):
    r"""
    Convert quaternions to rotation matrices. (numpy)

    :param q: Orientations (see `as_quaternion()` for the accepted types).
    :return: Rotation matrices in shape [..., 3, 3].
    """
    return quaternion.as_rotation_matrix(as_quaternion(q))
