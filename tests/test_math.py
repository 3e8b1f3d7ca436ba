import numpy as np
import pytest
import quaternion
import torch

from motionfilter import math as M


class TestLerp:
    def test_endpoints(self):
        assert M.lerp(2.0, 4.0, 0) == 2.0
        assert M.lerp(2.0, 4.0, 1) == 4.0
        assert M.lerp(2.0, 4.0, 0.25) == pytest.approx(2.5)

    def test_vector_types(self):
        a = np.array([0.0, 1.0, 2.0])
        assert np.allclose(M.lerp(a, 2 * a, 0.5), 1.5 * a)
        t = torch.ones(3)
        assert torch.allclose(M.lerp(t, 3 * t, 0.5), 2 * t)

    def test_zero_vector3(self):
        assert np.array_equal(M.zero_vector3(), np.zeros(3))


class TestQuaternion:
    def test_identity(self):
        assert M.identity_quaternion() == quaternion.quaternion(1, 0, 0, 0)

    def test_as_quaternion_from_wxyz(self):
        q = M.as_quaternion([0.0, 1.0, 0.0, 0.0])
        assert isinstance(q, quaternion.quaternion)
        assert q == quaternion.quaternion(0, 1, 0, 0)

    def test_as_quaternion_batch_and_torch(self):
        q = M.as_quaternion(torch.tensor([[1.0, 0, 0, 0], [0, 0, 1.0, 0]]))
        assert q.shape == (2,)
        assert np.allclose(quaternion.as_float_array(q), [[1, 0, 0, 0], [0, 0, 1, 0]])

    def test_as_quaternion_bad_shape(self):
        with pytest.raises(ValueError):
            M.as_quaternion([1.0, 0.0, 0.0])

    def test_slerp_endpoints(self):
        q0 = quaternion.quaternion(1, 0, 0, 0)
        q1 = quaternion.from_rotation_vector([0, 0, np.pi / 2])
        assert np.allclose(M.quaternion_slerp(q0, q1, 0).components, q0.components)
        assert np.allclose(M.quaternion_slerp(q0, q1, 1).components, q1.components)

    def test_slerp_halfway_angle(self):
        q0 = quaternion.quaternion(1, 0, 0, 0)
        q1 = quaternion.from_rotation_vector([0, 0, np.pi / 2])
        q = M.quaternion_slerp(q0, q1, 0.5)
        assert np.allclose(quaternion.as_rotation_vector(q), [0, 0, np.pi / 4])

    def test_slerp_takes_shortest_arc(self):
        q0 = quaternion.quaternion(1, 0, 0, 0)
        q1 = -quaternion.from_rotation_vector([0, 0, 0.2])   # same rotation, opposite hemisphere
        q = M.quaternion_slerp(q0, q1, 0.5)
        assert np.allclose(quaternion.as_rotation_vector(q), [0, 0, 0.1])

    def test_slerp_batch_is_unit(self, random_quaternions):
        q = M.quaternion_slerp(M.identity_quaternion(), random_quaternions, 0.3)
        assert q.shape == random_quaternions.shape
        assert np.allclose(np.linalg.norm(quaternion.as_float_array(q), axis=-1), 1)

    def test_rotation_matrix_round_trip(self, random_quaternions):
        R = M.quaternion_to_rotation_matrix(random_quaternions)
        assert R.shape == (8, 3, 3)
        q = M.rotation_matrix_to_quaternion(R)
        assert np.allclose(M.quaternion_to_rotation_matrix(q), R)

    def test_rotation_matrix_bad_shape(self):
        with pytest.raises(ValueError):
            M.rotation_matrix_to_quaternion(np.eye(4))

    def test_slerp_batch_matches_single(self, random_quaternions):
        targets = random_quaternions[::-1].copy()
        q = M.quaternion_slerp(random_quaternions, targets, 0.3)
        assert q.shape == (8,)
        for i in range(8):
            expected = M.quaternion_slerp(random_quaternions[i], targets[i], 0.3)
            assert np.allclose(q[i].components, expected.components)


class TestCopyValue:
    def test_arrays_are_copied(self):
        a = np.ones(3)
        b = M.copy_value(a)
        a[:] = 0
        assert np.array_equal(b, np.ones(3))
        t = torch.ones(3)
        u = M.copy_value(t)
        t[:] = 0
        assert torch.equal(u, torch.ones(3))

    def test_immutable_values_pass_through(self):
        q = quaternion.quaternion(1, 0, 0, 0)
        assert M.copy_value(q) is q
        assert M.copy_value(2.5) == 2.5
