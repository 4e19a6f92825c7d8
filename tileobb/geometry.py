import logging

import numpy as np

logger = logging.getLogger(__name__)

X_AXIS = np.array([1.0, 0.0, 0.0])
Y_AXIS = np.array([0.0, 1.0, 0.0])
Z_AXIS = np.array([0.0, 0.0, 1.0])

EPSILON = np.finfo(float).eps

# Corner i takes max on an axis where the flag is set, min otherwise
#      top (max z)        bottom (min z)
#      1-------0          5-------4
#      |       |          |       |
#      2-------3          6-------7
_CORNER_SELECT = np.array([
    [1, 1, 1],
    [0, 1, 1],
    [0, 0, 1],
    [1, 0, 1],
    [1, 1, 0],
    [0, 1, 0],
    [0, 0, 0],
    [1, 0, 0],
], dtype=bool)


def normalize(v: np.ndarray) -> np.ndarray:
    """Return v scaled to unit length (a zero vector is returned unchanged)"""
    v = np.asarray(v, dtype=float)
    length = np.linalg.norm(v)
    return v / (length or 1.0)


def project_on_plane(points: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """Project points orthogonally onto the plane through the origin with the given normal

    Parameters
    ----------
    points : np.ndarray
        [x, y, z] or an (N, 3) array of points
    normal : np.ndarray
        unit normal of the plane

    Returns
    -------
    projected : np.ndarray
        Same shape as points
    """
    points = np.asarray(points, dtype=float)
    return points - np.multiply.outer(points @ normal, normal)


#--------------------------------------------------------------
# Quaternions, stored as [x, y, z, w]
#--------------------------------------------------------------
def quaternion_identity() -> np.ndarray:
    return np.array([0.0, 0.0, 0.0, 1.0])


def quaternion_conjugate(q: np.ndarray) -> np.ndarray:
    return np.array([-q[0], -q[1], -q[2], q[3]])


def quaternion_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotation of angle radians around a unit axis"""
    s = np.sin(angle / 2.0)
    return np.array([axis[0] * s, axis[1] * s, axis[2] * s, np.cos(angle / 2.0)])


def quaternion_from_unit_vectors(v_from: np.ndarray, v_to: np.ndarray) -> np.ndarray:
    """Shortest rotation taking unit vector v_from onto unit vector v_to

    Opposite vectors rotate half a turn around an arbitrary axis orthogonal to v_from.
    """
    r = float(np.dot(v_from, v_to)) + 1.0

    if r < EPSILON:
        r = 0.0
        if abs(v_from[0]) > abs(v_from[2]):
            q = np.array([-v_from[1], v_from[0], 0.0, r])
        else:
            q = np.array([0.0, -v_from[2], v_from[1], r])
    else:
        c = np.cross(v_from, v_to)
        q = np.array([c[0], c[1], c[2], r])

    return normalize(q)


def quaternion_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product a * b (b is applied first when rotating)"""
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return np.array([
        ax * bw + aw * bx + ay * bz - az * by,
        ay * bw + aw * by + az * bx - ax * bz,
        az * bw + aw * bz + ax * by - ay * bx,
        aw * bw - ax * bx - ay * by - az * bz,
    ])


def quaternion_from_rotation_matrix(m: np.ndarray) -> np.ndarray:
    """Convert a pure 3x3 rotation matrix to a quaternion"""
    m11, m12, m13 = m[0]
    m21, m22, m23 = m[1]
    m31, m32, m33 = m[2]
    trace = m11 + m22 + m33

    if trace > 0:
        s = 0.5 / np.sqrt(trace + 1.0)
        q = [(m32 - m23) * s, (m13 - m31) * s, (m21 - m12) * s, 0.25 / s]
    elif m11 > m22 and m11 > m33:
        s = 2.0 * np.sqrt(1.0 + m11 - m22 - m33)
        q = [0.25 * s, (m12 + m21) / s, (m13 + m31) / s, (m32 - m23) / s]
    elif m22 > m33:
        s = 2.0 * np.sqrt(1.0 + m22 - m11 - m33)
        q = [(m12 + m21) / s, 0.25 * s, (m23 + m32) / s, (m13 - m31) / s]
    else:
        s = 2.0 * np.sqrt(1.0 + m33 - m11 - m22)
        q = [(m13 + m31) / s, (m23 + m32) / s, 0.25 * s, (m21 - m12) / s]

    return np.array(q, dtype=float)


def rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate a vector, or an (N, 3) array of vectors, by quaternion q"""
    v = np.asarray(v, dtype=float)
    u = q[:3]
    t = 2.0 * np.cross(u, v)
    return v + q[3] * t + np.cross(u, t)


def look_at_matrix(direction: np.ndarray, up: np.ndarray = Z_AXIS) -> np.ndarray:
    """Rotation whose local +Z points along direction, local +Y as close to up as possible

    Parameters
    ----------
    direction : np.ndarray
        Direction the local Z axis should take
    up : np.ndarray
        Reference up vector

    Returns
    -------
    R : np.ndarray
        3x3 rotation matrix, columns are the local x, y, z axes in world space
    """
    z = normalize(direction)
    if not z.any():
        z = Z_AXIS.copy()

    x = np.cross(up, z)
    if np.dot(x, x) == 0:
        # direction is parallel to up, the heading is undefined
        logger.warning("look-at direction %s is parallel to up %s, perturbing", z, up)
        z = z.copy()
        if abs(up[2]) == 1:
            z[0] += 0.0001
        else:
            z[2] += 0.0001
        z = normalize(z)
        x = np.cross(up, z)

    x = normalize(x)
    y = np.cross(z, x)
    return np.column_stack([x, y, z])


#--------------------------------------------------------------
# Axis aligned box
#--------------------------------------------------------------
class Box3:
    """Axis aligned box given by its min and max corners

    Attributes
    ----------
    min : np.ndarray
        [x, y, z] of the min corner
    max : np.ndarray
        [x, y, z] of the max corner
    """

    def __init__(self, min_point, max_point, readonly: bool = False):
        self.min = np.array(min_point, dtype=float)
        self.max = np.array(max_point, dtype=float)
        if readonly:
            self.min.setflags(write=False)
            self.max.setflags(write=False)

    def clone(self, readonly: bool = False) -> 'Box3':
        return Box3(self.min, self.max, readonly=readonly)

    def size(self) -> np.ndarray:
        return self.max - self.min

    def corners(self) -> np.ndarray:
        """The 8 corners as an (8, 3) array, top face first, see _CORNER_SELECT"""
        return np.where(_CORNER_SELECT, self.max, self.min)

    def __eq__(self, other):
        if not isinstance(other, Box3):
            return NotImplemented
        return np.array_equal(self.min, other.min) and np.array_equal(self.max, other.max)

    def __repr__(self):
        return f'Box3(min={self.min.tolist()}, max={self.max.tolist()})'
