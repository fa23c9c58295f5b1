"""
Outer fixed-point drivers: plain iteration and Anderson-accelerated iteration.

The accelerated driver optionally safeguards every step with an energy:
an accelerated iterate that does not decrease the energy is rejected in favor
of the plain step g(u) from the last accepted iterate.
"""

import numpy as np
import time

from .anderson import AndersonAcceleration


def fixed_point_plain(g, u0, max_iters=1000, tol=1e-10, verbose=False, print_every=50):
    """
    Plain fixed-point iteration u <- g(u).

    Args:
        g: Map R^d -> R^d
        u0: Initial iterate
        max_iters: Maximum number of map evaluations
        tol: Stop when ||g(u) - u|| <= tol
        verbose: Print progress
        print_every: Progress print period (iterations)

    Returns:
        u: Final iterate
        history: List of (iter, residual_norm, time) tuples
    """
    u = np.array(u0, dtype=np.float64).ravel()
    history = []
    t0 = time.time()

    for k in range(max_iters):
        g_u = np.asarray(g(u), dtype=u.dtype).ravel()
        if g_u.shape != u.shape:
            raise ValueError(f"map returned length {g_u.shape[0]}, expected {u.shape[0]}")
        res = float(np.linalg.norm(g_u - u))
        history.append((k, res, time.time() - t0))

        if verbose and k % print_every == 0:
            print(f"[FP] it={k:4d} ||F||={res:.3e}")

        if res <= tol:
            break
        u = g_u

    return u, history


def fixed_point_anderson(g, u0, m=5, max_iters=1000, tol=1e-10, energy=None,
                         restart_after=None, dtype=np.float64, verbose=False,
                         print_every=50):
    """
    Anderson-accelerated fixed-point iteration.

    Args:
        g: Map R^d -> R^d
        u0: Initial iterate
        m: Anderson window size
        max_iters: Maximum number of accelerated steps
        tol: Stop when ||g(u) - u|| <= tol
        energy: Optional callable u -> float; enables the descent safeguard
        restart_after: With the safeguard, discard the Anderson history after
            this many consecutive rejections (None keeps it)
        dtype: Precision of the accelerator (np.float32 or np.float64)
        verbose: Print progress
        print_every: Progress print period (iterations)

    Returns:
        u: Final iterate
        history: List of (iter, residual_norm, time, accepted) tuples
    """
    u = np.array(u0, dtype=dtype).ravel()
    aa = AndersonAcceleration(m, u.shape[0], u, dtype=dtype)

    g_u = np.asarray(g(u), dtype=dtype)
    e_u = energy(u) if energy is not None else None
    accepted = True

    history = []
    n_reject = 0
    n_streak = 0
    t0 = time.time()

    for k in range(max_iters):
        res = float(np.linalg.norm(g_u.ravel() - u))
        history.append((k, res, time.time() - t0, accepted))

        if verbose and k % print_every == 0:
            print(f"[AA({m})] it={k:4d} ||F||={res:.3e} rejected={n_reject}")

        if res <= tol:
            break

        u_next = aa.compute(g_u)
        g_next = np.asarray(g(u_next), dtype=dtype)
        accepted = True

        if energy is not None:
            e_next = energy(u_next)
            if not e_next < e_u:
                # fall back to the plain step from the last accepted iterate
                u_next = np.array(g_u, dtype=dtype).ravel()
                n_reject += 1
                n_streak += 1
                if restart_after is not None and n_streak >= restart_after:
                    aa.reset(u_next)
                    n_streak = 0
                else:
                    aa.replace(u_next)
                g_next = np.asarray(g(u_next), dtype=dtype)
                e_next = energy(u_next)
                accepted = False
            else:
                n_streak = 0
            e_u = e_next

        u, g_u = u_next, g_next

    if verbose and history:
        print(f"[AA({m})] done: it={len(history)} ||F||={history[-1][1]:.3e} rejected={n_reject}")

    return u, history
