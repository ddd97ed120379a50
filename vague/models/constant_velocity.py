"""
Planar constant-velocity target model.

Provides dynamics, measurement functions and their Jacobians for a point
target moving with (nearly) constant velocity in the plane, observed either
by a position sensor or by a range-bearing sensor at a known pose.

State: x = [px, py, vx, vy]
- (px, py): position in world frame (m)
- (vx, vy): velocity in world frame (m/s)

Position measurement: z = [px, py]

Range-bearing measurement: z = [r, theta]
- r: distance from the sensor to the target (m)
- theta: bearing of the target relative to the sensor heading (rad)

The sensor pose [sx, sy, heading] is passed to the observers as augmented
state, so one model serves any number of sensors.
"""

import numpy as np

from ..common.angles import normalize_angle
from ..common.residuals import make_mean_fn, make_residual_fn
from .base import LinearModel, SampledModel, linearized


class ConstantVelocityTarget:
    """
    Constant-velocity target in the plane.

    Parameters
    ----------
    acceleration_psd : float, optional
        Power spectral density of the white acceleration noise driving the
        velocity, in (m/s^2)^2 / Hz (default: 0.1)
    position_psd : float, optional
        Additional random walk on position, in m^2 / s (default: 0.0)
    """

    dim_x = 4

    def __init__(self, acceleration_psd=0.1, position_psd=0.0):
        self.acceleration_psd = acceleration_psd
        self.position_psd = position_psd

    #======================================================
    # Dynamics
    #======================================================
    def transition(self, dt):
        """State transition matrix F(dt)."""
        F = np.eye(4)
        F[0, 2] = dt
        F[1, 3] = dt
        return F

    def dynamics(self, x, dt):
        """
        Discrete-time dynamics: x_{k+1} = f(x_k, dt)
        """
        px, py, vx, vy = x
        return np.array([px + vx * dt, py + vy * dt, vx, vy])

    def process_noise_rate(self):
        """Per-second process noise matrix for additive time-scaled noise."""
        return np.diag([self.position_psd, self.position_psd,
                        self.acceleration_psd, self.acceleration_psd])

    def dynamics_model(self):
        """Dynamics as a ``LinearModel`` of dt."""
        return LinearModel(self.transition)

    #======================================================
    # Measurements
    #======================================================
    def position(self, x):
        """Measurement model: z = [px, py]"""
        return np.asarray(x[:2], dtype=float)

    def jacobian_position(self):
        H = np.zeros((2, 4))
        H[0, 0] = 1.0
        H[1, 1] = 1.0
        return H

    def position_observer(self):
        return LinearModel(self.jacobian_position())

    def range_bearing(self, x, sensor_pose):
        """
        Measurement model: z = [r, theta]

        Parameters
        ----------
        x : np.ndarray
            Target state [px, py, vx, vy]
        sensor_pose : array_like
            Sensor pose [sx, sy, heading]
        """
        sx, sy, heading = sensor_pose
        dx = x[0] - sx
        dy = x[1] - sy
        r = np.hypot(dx, dy)
        theta = normalize_angle(np.arctan2(dy, dx) - heading)
        return np.array([r, theta])

    def jacobian_range_bearing(self, x, sensor_pose):
        """
        Jacobian H = dh/dx of the range-bearing model
        """
        sx, sy, _ = sensor_pose
        dx = x[0] - sx
        dy = x[1] - sy
        r2 = dx**2 + dy**2
        r = np.sqrt(r2)

        H = np.zeros((2, 4))

        # range
        H[0, 0] = dx / r
        H[0, 1] = dy / r

        # bearing
        H[1, 0] = -dy / r2
        H[1, 1] =  dx / r2

        return H

    def range_bearing_observer(self, sampled=True):
        """
        Range-bearing observer, sigma-point (default) or linearized.

        The sigma-point observer averages the bearing circularly and wraps
        bearing deviations, so targets behind the sensor (bearing near
        +/-pi) are handled.
        """
        if sampled:
            return SampledModel(self.range_bearing, dim_from=4, dim_to=2,
                                mean_fn=make_mean_fn(angle_indices=[1]),
                                residual_fn=make_residual_fn(angle_indices=[1]))
        return linearized(self.range_bearing, self.jacobian_range_bearing,
                          dim_from=4, dim_to=2)
