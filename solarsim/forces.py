"""Pairwise gravitational force evaluation."""
import numpy as np

from . import constants as C


def pairwise_contributions(positions: np.ndarray, masses: np.ndarray):
    """Return the per-pair accelerations ``(i, j, acc_i, acc_j)``.

    ``i`` and ``j`` are the ``i < j`` index arrays in ``triu_indices`` order;
    ``acc_i[k]`` is the pull of body ``j[k]`` on body ``i[k]`` and ``acc_j[k]``
    the opposite pull, both built from one shared displacement vector.
    """
    positions = np.asarray(positions, dtype=np.float64)
    masses = np.asarray(masses, dtype=np.float64)
    i, j = np.triu_indices(len(masses), k=1)

    # 从i指向j的位移 (米)
    d = C.AU * (positions[j] - positions[i])
    r = np.sqrt(np.sum(d * d, axis=1))
    mag = C.G_ACC / (r * r * r)

    acc_i = (mag * masses[j])[:, None] * d
    acc_j = (mag * -masses[i])[:, None] * d
    return i, j, acc_i, acc_j


def compute_accelerations(
    positions: np.ndarray,
    masses: np.ndarray,
    out: np.ndarray = None,
) -> np.ndarray:
    """Compute the net gravitational acceleration on every body.

    Parameters
    ----------
    positions : ndarray, shape (N, 3)
        Body positions in AU.
    masses : ndarray, shape (N,)
        Body masses in kilograms.
    out : ndarray, shape (N, 3), optional
        Destination array. It is zeroed before use so successive calls never
        accumulate.

    Returns
    -------
    ndarray
        Accelerations in AU/day².

    Notes
    -----
    Every unordered pair ``i < j`` is visited once.  The displacement is
    taken in metres and one scalar ``G_ACC / r**3`` is computed per pair; body
    ``i`` receives ``+m_j`` times that vector and body ``j`` receives ``-m_i``
    times the same vector, so the pair obeys Newton's third law.
    Coincident bodies (``r == 0``) are not guarded against and yield
    non-finite accelerations.
    """
    n = len(masses)
    if out is None:
        out = np.zeros((n, 3), dtype=np.float64)
    else:
        out[...] = 0.0
    if n < 2:
        return out

    i, j, acc_i, acc_j = pairwise_contributions(positions, masses)
    # np.add.at applies repeated indices in order, so the sum is deterministic
    np.add.at(out, i, acc_i)
    np.add.at(out, j, acc_j)
    return out
