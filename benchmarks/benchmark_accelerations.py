import time
import numpy as np

from solarsim.forces import compute_accelerations
from solarsim.constants import AU, G_ACC


def compute_accelerations_python(positions, masses):
    n = len(masses)
    acc = np.zeros((n, 3), dtype=np.float64)
    for i in range(n - 1):
        for j in range(i + 1, n):
            d = AU * (positions[j] - positions[i])
            r = np.sqrt(np.dot(d, d))
            mag = G_ACC / (r * r * r)
            acc[i] += (mag * masses[j]) * d
            acc[j] += (mag * -masses[i]) * d
    return acc


if __name__ == "__main__":
    np.random.seed(0)
    N = 300
    positions = np.random.random((N, 3)) * 30.0
    masses = (np.random.random(N) + 1.0) * 1e24

    t0 = time.time()
    baseline = compute_accelerations_python(positions, masses)
    t1 = time.time()
    vectorized = compute_accelerations(positions, masses)
    t2 = time.time()

    assert np.allclose(baseline, vectorized, rtol=1e-10, atol=0.0)
    print(f"Python loop: {t1 - t0:.3f}s")
    print(f"Vectorized : {t2 - t1:.3f}s")
    if t2 - t1 > 0:
        print(f"Speedup     : {(t1 - t0) / (t2 - t1):.1f}x")
