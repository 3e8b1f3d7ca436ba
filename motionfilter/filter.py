r"""
    Temporal filters.

    Recursive (IIR) low-pass filters for signals sampled at a fixed rate. Each call to `process()` consumes one sample
    and returns the filtered output, which is also retained as the filter state for the next call. The filters have
    no concept of timestamps, so samples must be fed in temporal order.
"""


__all__ = ['InvalidArgument', 'DEFAULT_Q', 'Filter', 'OnePole', 'OnePoleRotation', 'OnePoleRotationMatrix',
           'OnePoleVector3', 'BiQuad', 'BiQuadVector3']


import logging
from . import math as M
import numpy as np
import torch


LOGGER = logging.getLogger(__name__)

DEFAULT_Q = 0.5   # critically damped


class InvalidArgument(ValueError):
    r"""
    Raised when a filter is configured with an invalid cutoff frequency, sample rate or Q factor.
    """


def _check_cutoff(fc, fs):
    if not np.isfinite(fs) or fs <= 0:
        raise InvalidArgument('sample rate must be a positive number, got {}'.format(fs))
    if not np.isfinite(fc) or fc <= 0:
        raise InvalidArgument('cutoff frequency must be a positive number, got {}'.format(fc))
    if fc >= fs / 2:
        raise InvalidArgument('cutoff frequency {} must be below the Nyquist limit {}'.format(fc, fs / 2))


class Filter:
    r"""
    Filter base class.
    """
    def __init__(self, value=0.):
        r"""
        :param value: Initial output of the filter.
        """
        self._configured = False
        self._warned = False
        self._fc = None
        self._fs = None
        self.set_value(value)

    def set_value(self, value):
        r"""
        Set the output of the filter.

        The value is copied, so the caller may reuse its buffer.

        :param value: New value.
        """
        self._value = M.copy_value(value)

    def get_value(self):
        r"""
        Get the output of the filter.

        :return: Filter's output.
        """
        return self._value

    @property
    def value(self):
        r"""
        Filter's output, same as `get_value()`.
        """
        return self.get_value()

    @property
    def cutoff(self):
        r"""
        Cutoff frequency of the last configuration, or None if the filter is not configured.
        """
        return self._fc

    @property
    def sample_rate(self):
        r"""
        Sample rate of the last configuration, or None if the filter is not configured.
        """
        return self._fs

    @property
    def is_configured(self):
        r"""
        Whether the coefficients have been computed by a `set_cutoff*()` call.
        """
        return self._configured

    def set_cutoff(self, fc, fs):
        r"""
        Set the cutoff frequency and sample rate.

        :param fc: Cutoff frequency in Hz. Must be in (0, fs / 2).
        :param fs: Sample rate in Hz. Must be positive.
        """
        raise NotImplementedError

    def process(self, x):
        r"""
        Update the filter's output.

        :param x: Input value.
        :return: The filter's current output.
        """
        raise NotImplementedError

    def __call__(self, x):
        r"""
        Same as `process()`.
        """
        return self.process(x)

    def _configure(self, fc, fs):
        self._fc = fc
        self._fs = fs
        self._configured = True

    def _warn_if_unconfigured(self):
        if not self._configured and not self._warned:
            LOGGER.warning('%s processed a sample before set_cutoff(); output is degenerate', type(self).__name__)
            self._warned = True


class OnePole(Filter):
    r"""
    A one-pole low-pass filter.

    The analog RC pole is mapped to discrete time by exponential decay:

    :math:`y_t = \text{blend}(y_{t-1}, x_t, a_0)`, where :math:`b_1 = e^{-2\pi f_c / f_s}`, :math:`a_0 = 1 - b_1`.

    With the default linear blend this is :math:`y_t = a_0 x_t + b_1 y_{t-1}`.

    See http://www.earlevel.com/main/2012/12/15/a-one-pole-filter/
    """
    def __init__(self, fc=None, fs=None, value=0., blend=M.lerp):
        r"""
        :param fc: Cutoff frequency in Hz. If fc and fs are None, the filter is left unconfigured.
        :param fs: Sample rate in Hz.
        :param value: Initial output of the filter.
        :param blend: Update rule blend(last_output, x, t) that moves the output towards x by fraction t.
                      Use `M.lerp` for vector space types and `M.quaternion_slerp` for orientations.
        """
        self.blend = blend
        self._a0 = 0.
        self._b1 = 0.
        super().__init__(value)
        if fc is not None or fs is not None:
            if fc is None or fs is None:
                raise InvalidArgument('both cutoff frequency and sample rate are required')
            self.set_cutoff(fc, fs)

    @property
    def gain_in(self):
        r"""
        Input gain :math:`a_0`.
        """
        return self._a0

    @property
    def feedback_gain(self):
        r"""
        Feedback gain :math:`b_1`.
        """
        return self._b1

    def set_cutoff(self, fc, fs):
        r"""
        Set the cutoff frequency and sample rate.

        :param fc: Cutoff frequency in Hz. Must be in (0, fs / 2).
        :param fs: Sample rate in Hz. Must be positive.
        :raises InvalidArgument: If fc or fs is out of range. The coefficients are left unchanged.
        """
        _check_cutoff(fc, fs)
        self._b1 = float(np.exp(-2.0 * np.pi * fc / fs))
        self._a0 = 1.0 - self._b1
        self._configure(fc, fs)
        LOGGER.debug('%s: fc=%s, fs=%s, a0=%.6g, b1=%.6g', type(self).__name__, fc, fs, self._a0, self._b1)

    def process(self, x):
        r"""
        Blend the output towards x by the input gain.

        :param x: Input value.
        :return: The filter's current output.
        """
        self._warn_if_unconfigured()
        self.set_value(self.blend(self.get_value(), x, self._a0))
        return self.get_value()


class OnePoleRotation(OnePole):
    r"""
    One-pole orientation filter.

    The output is slerped from the last output towards the new sample by the input gain, so it always stays a unit
    quaternion. Both a single orientation and a batch of orientations (quaternion array) are supported.
    """
    def __init__(self, fc=None, fs=None, value=None):
        r"""
        :param fc: Cutoff frequency in Hz.
        :param fs: Sample rate in Hz.
        :param value: Initial orientation. Identity if None.
        """
        super().__init__(fc, fs, M.identity_quaternion() if value is None else value, blend=M.quaternion_slerp)

    def set_value(self, value):
        r"""
        Set the output of the filter.

        :param value: New orientation as a quaternion, a quaternion array, or wxyz values in shape [..., 4].
        """
        super().set_value(M.as_quaternion(value))


class OnePoleRotationMatrix(OnePoleRotation):
    r"""
    One-pole orientation filter for rotation matrices.

    The state is kept as quaternions. `process()` and `get_value()` return rotation matrices in the type (numpy
    array or torch tensor), dtype and device of the last rotation matrices given to `process()` or `set_value()`.
    """
    def __init__(self, fc=None, fs=None, value=None):
        r"""
        :param fc: Cutoff frequency in Hz.
        :param fs: Sample rate in Hz.
        :param value: Initial orientation (rotation matrices or quaternions). Identity if None.
        """
        self._tensor_like = None   # (dtype, device) of the last torch input, None for numpy
        super().__init__(fc, fs, value)

    def _remember_type(self, R):
        self._tensor_like = (R.dtype, R.device) if isinstance(R, torch.Tensor) else None

    def set_value(self, value):
        r"""
        Set the output of the filter.

        :param value: New orientation as rotation matrices in shape [..., 3, 3], or any orientation accepted by
                      `OnePoleRotation.set_value()`.
        """
        if not M.is_quaternion(value) and np.shape(value)[-2:] == (3, 3):
            self._remember_type(value)
            value = M.rotation_matrix_to_quaternion(value)
        super().set_value(value)

    def get_value(self):
        r"""
        Get the output of the filter.

        :return: Rotation matrices in shape [..., 3, 3].
        """
        R = M.quaternion_to_rotation_matrix(super().get_value())
        if self._tensor_like is not None:
            dtype, device = self._tensor_like
            return torch.from_numpy(R).to(dtype=dtype, device=device)
        return R

    def process(self, x):
        r"""
        Smooth the current rotations x.

        :param x: Rotation matrices in shape [..., 3, 3] (numpy array or torch tensor).
        :return: Filtered rotation matrices in the same shape and type as x.
        """
        self._warn_if_unconfigured()
        self._remember_type(x)
        q = M.quaternion_slerp(super().get_value(), M.rotation_matrix_to_quaternion(x), self._a0)
        OnePoleRotation.set_value(self, q)
        return self.get_value().reshape(np.shape(x))


class OnePoleVector3(OnePole):
    r"""
    One-pole vector3 filter.
    """
    def __init__(self, fc=None, fs=None):
        r"""
        :param fc: Cutoff frequency in Hz.
        :param fs: Sample rate in Hz.
        """
        super().__init__(fc, fs, M.zero_vector3())


class BiQuad(Filter):
    r"""
    Second-order (bi-quad) low-pass filter designed by the bilinear transform.

    Direct form I:
    :math:`y_t = a_0 x_t + a_1 x_{t-1} + a_2 x_{t-2} - b_1 y_{t-1} - b_2 y_{t-2}`

    See http://www.earlevel.com/main/2003/03/02/the-bilinear-z-transform/
    """
    def __init__(self, fc=None, fs=None, q=DEFAULT_Q, value=0.):
        r"""
        :param fc: Cutoff frequency in Hz. If fc and fs are None, the filter is left unconfigured.
        :param fs: Sample rate in Hz.
        :param q: Q factor. Lower values damp more; the default 0.5 does not overshoot.
        :param value: Initial output and history of the filter.
        """
        self._a0 = self._a1 = self._a2 = self._b0 = self._b1 = self._b2 = 0.
        self._q = None
        super().__init__(value)
        if fc is not None or fs is not None:
            if fc is None or fs is None:
                raise InvalidArgument('both cutoff frequency and sample rate are required')
            self.set_cutoff_with_q(fc, fs, q)

    @property
    def q(self):
        r"""
        Q factor of the last configuration, or None if the filter is not configured.
        """
        return self._q

    @property
    def coefficients(self):
        r"""
        Filter coefficients (a0, a1, a2, b0, b1, b2).
        """
        return self._a0, self._a1, self._a2, self._b0, self._b1, self._b2

    def set_cutoff(self, fc, fs):
        r"""
        Set the cutoff frequency and sample rate with the default Q factor `DEFAULT_Q`.

        :param fc: Cutoff frequency in Hz. Must be in (0, fs / 2).
        :param fs: Sample rate in Hz. Must be positive.
        """
        self.set_cutoff_with_q(fc, fs, DEFAULT_Q)

    def set_cutoff_with_q(self, fc, fs, q):
        r"""
        Set the cutoff frequency, sample rate and Q factor.

        :param fc: Cutoff frequency in Hz. Must be in (0, fs / 2).
        :param fs: Sample rate in Hz. Must be positive.
        :param q: Q factor. Must be positive.
        """
        _check_cutoff(fc, fs)
        if not np.isfinite(q) or q <= 0:
            raise InvalidArgument('Q factor must be a positive number, got {}'.format(q))
        k = float(np.tan(np.pi * fc / fs))
        denom = k * k + k / q + 1.0
        self._a0 = k * k / denom
        self._a1 = 2 * self._a0
        self._a2 = self._a0
        self._b0 = 1.0
        self._b1 = 2 * (k * k - 1.0) / denom
        self._b2 = (k * k - k / q + 1.0) / denom
        self._q = q
        self._configure(fc, fs)
        LOGGER.debug('%s: fc=%s, fs=%s, q=%s, coefficients=%s', type(self).__name__, fc, fs, q, self.coefficients)

    def set_value(self, value):
        r"""
        Set the output of the filter and reset both input and output histories to the same value.

        :param value: New value.
        """
        super().set_value(value)
        self._x1 = self._x2 = self._y1 = self._y2 = self.get_value()

    def process(self, x):
        r"""
        Update the filter's output by the direct form I recursion.

        :param x: Input value. It is copied into the history, so the caller may reuse its buffer.
        :return: The filter's current output.
        """
        self._warn_if_unconfigured()
        y = self._a0 * x + self._a1 * self._x1 + self._a2 * self._x2 - self._b1 * self._y1 - self._b2 * self._y2
        self._x2 = self._x1
        self._x1 = M.copy_value(x)
        self._y2 = self._y1
        self._y1 = y
        Filter.set_value(self, y)
        return self.get_value()


class BiQuadVector3(BiQuad):
    r"""
    Bi-quad vector3 filter.
    """
    def __init__(self, fc=None, fs=None, q=DEFAULT_Q):
        r"""
        :param fc: Cutoff frequency in Hz.
        :param fs: Sample rate in Hz.
        :param q: Q factor.
        """
        super().__init__(fc, fs, q, M.zero_vector3())
