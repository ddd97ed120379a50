"""
Tracking Example for a Constant-Velocity Target

Two range-bearing sensors observe a target at irregular, interleaved times.
The same measurements are fused twice: once with a linearized (EKF-style)
observer and once with a sigma-point (UKF-style) observer.
"""

import numpy as np
import matplotlib.pyplot as plt
import sys
import os
from pathlib import Path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from vague import MeanAndCovariance, TimeDependentAdditiveProcessNoise, make_estimator
from vague.common import make_residual_fn
from vague.log import setup_logging
from vague.metrics import compute_all_metrics, print_metrics
from vague.models import ConstantVelocityTarget

# ============================================================================
# CONFIGURATION
# ============================================================================
SEED = 7
DURATION = 30.0  # seconds
MEAN_INTERVAL = 0.2  # mean time between measurements (s)
SENSORS = [np.array([0.0, 0.0, 0.0]),
           np.array([50.0, -20.0, np.pi / 2])]
RANGE_STD = 0.5  # m
BEARING_STD = np.deg2rad(1.0)  # rad

RESULTS_PATH = Path(__file__).parent / 'results'
# ============================================================================


def simulate(target, rng):
    """Generate ground truth and asynchronous range-bearing measurements."""
    times = np.cumsum(rng.exponential(MEAN_INTERVAL, size=int(2 * DURATION / MEAN_INTERVAL)))
    times = times[times < DURATION]

    x = np.array([10.0, 5.0, 1.0, 0.5])
    t_prev = 0.0
    truth, measurements = [], []
    for t in times:
        dt = t - t_prev
        x = target.dynamics(x, dt)
        x[2:] += rng.normal(0.0, np.sqrt(target.acceleration_psd * dt), size=2)
        sensor = SENSORS[rng.integers(len(SENSORS))]
        z = target.range_bearing(x, sensor) + rng.normal(0.0, [RANGE_STD, BEARING_STD])
        truth.append(x.copy())
        measurements.append((t, sensor, z))
        t_prev = t

    return np.array(truth), measurements


def run_filter(target, measurements, sampled):
    estimator = make_estimator(0.0, (np.array([10.0, 5.0, 0.0, 0.0]),
                                     np.diag([4.0, 4.0, 1.0, 1.0])))
    dynamics = target.dynamics_model()
    process_noise = TimeDependentAdditiveProcessNoise(target.process_noise_rate())
    observer = target.range_bearing_observer(sampled=sampled)
    residual_fn = make_residual_fn(angle_indices=[1])
    R = np.diag([RANGE_STD**2, BEARING_STD**2])

    estimates, covariances, innovations, innovation_covs = [], [], [], []
    for t, sensor, z in measurements:
        estimator.predict(t, dynamics, process_noise)
        predicted = estimator.predict_observation(observer, sensor)
        estimator.assimilate(predicted, MeanAndCovariance(z, R), residual_fn=residual_fn)

        estimates.append(estimator.estimate.mean)
        covariances.append(estimator.estimate.covariance)
        innovations.append(estimator.last_update.innovation)
        innovation_covs.append(estimator.last_update.innovation_covariance)

    return (np.array(estimates), np.array(covariances),
            np.array(innovations), np.array(innovation_covs))


def run_tracking_example():
    setup_logging("INFO")
    rng = np.random.default_rng(SEED)
    target = ConstantVelocityTarget(acceleration_psd=0.05)

    print("=" * 60)
    print("Constant-Velocity Tracking Example")
    print("=" * 60)

    truth, measurements = simulate(target, rng)
    print(f"Simulated {len(measurements)} measurements over {DURATION:.0f} s")

    results = {}
    for name, sampled in [('EKF', False), ('UKF', True)]:
        estimates, covariances, innovations, innovation_covs = run_filter(
            target, measurements, sampled)
        metrics = compute_all_metrics(estimates, truth, covariances,
                                      innovations, innovation_covs)
        print_metrics(metrics, filter_name=name)
        results[name] = estimates

    RESULTS_PATH.mkdir(parents=True, exist_ok=True)
    fig, ax = plt.subplots(figsize=(7, 6))
    ax.plot(truth[:, 0], truth[:, 1], 'k-', linewidth=2, label='Truth', alpha=0.7)
    ax.plot(results['EKF'][:, 0], results['EKF'][:, 1], 'b--', label='EKF')
    ax.plot(results['UKF'][:, 0], results['UKF'][:, 1], 'r:', label='UKF')
    for sensor in SENSORS:
        ax.plot(sensor[0], sensor[1], 'g^', markersize=10)
    ax.set_xlabel('X [m]')
    ax.set_ylabel('Y [m]')
    ax.axis('equal')
    ax.legend()
    ax.grid(True)
    fig_path = RESULTS_PATH / 'tracking.png'
    fig.savefig(fig_path, dpi=150, bbox_inches='tight')
    print(f"  Saved: {fig_path}")


if __name__ == "__main__":
    run_tracking_example()
