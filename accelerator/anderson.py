"""
Anderson acceleration for fixed-point iterations u_{k+1} = g(u_k).

History of the last m increments of the iterate (dG) and of the residual (dF)
is kept in preallocated d x m ring buffers. Each dF column is normalized by
its own norm when finalized; the Gram matrix of the active columns is updated
one row/column per call and solved with a complete orthogonal factorization
(LAPACK gelsy), which tolerates nearly collinear history.
"""

import numpy as np
from scipy.linalg import lstsq

EPS = 1e-14

_DTYPES = (np.float32, np.float64)


def _is_positive_int(n):
    return isinstance(n, (int, np.integer)) and not isinstance(n, bool) and n > 0


def gram_matrix(dF, cols):
    """Full recomputation of the Gram matrix dF[:, cols]^T dF[:, cols]."""
    B = dF[:, cols]
    return B.T @ B


def solve_normal_equations(M, rhs):
    """
    Rank-revealing solve of M theta = rhs.

    Uses a complete orthogonal factorization with column pivoting, so a
    singular or ill-conditioned M yields the minimum-norm solution instead
    of failing. A LAPACK failure returns zeros (unaccelerated step).
    """
    try:
        theta = lstsq(M, rhs, lapack_driver='gelsy', check_finite=False)[0]
    except np.linalg.LinAlgError:
        theta = np.zeros_like(rhs)
    return theta


class AndersonAcceleration:
    """
    Anderson(m) accelerator with a fixed-capacity circular history.

    Usage:
        aa = AndersonAcceleration(m, d, u0)
        u = u0
        for k in range(n_iters):
            u = aa.compute(g(u))

    Args:
        m: Window size (number of history columns kept), m > 0
        d: Dimension of the iterate
        u0: Initial iterate of length d
        dtype: np.float32 or np.float64, fixed for the instance

    If m, d, u0 are omitted the instance must be initialized with init().
    """

    def __init__(self, m=None, d=None, u0=None, dtype=np.float64):
        dtype = np.dtype(dtype)
        if dtype.type not in _DTYPES:
            raise ValueError("dtype must be float32 or float64")
        self.dtype = dtype
        self.m = -1
        self.d = -1
        self.iteration = -1
        self.col_idx = -1
        if m is not None or d is not None or u0 is not None:
            self.init(m, d, u0)

    # ---- lifecycle ----
    def init(self, m, d, u0):
        """
        Allocate history buffers and set the initial iterate.

        Args:
            m: Number of previous iterates used
            d: Dimension of variables
            u0: Initial variable values
        """
        if not _is_positive_int(m):
            raise ValueError("window size m must be a positive integer")
        if not _is_positive_int(d):
            raise ValueError("dimension d must be a positive integer")
        if u0 is None:
            raise ValueError("initial iterate u0 is required")
        m, d = int(m), int(d)
        self.m = m
        self.d = d
        self.u = np.zeros(d, dtype=self.dtype)
        self.F = np.zeros(d, dtype=self.dtype)
        self.dG = np.zeros((d, m), dtype=self.dtype)
        self.dF = np.zeros((d, m), dtype=self.dtype)
        self.M = np.zeros((m, m), dtype=self.dtype)     # normal equations matrix
        self.theta = np.zeros(m, dtype=self.dtype)
        self.scale = np.zeros(m, dtype=self.dtype)      # dF column scaling factors
        self.u[:] = self._as_vector(u0)
        self.iteration = 0
        self.col_idx = 0

    def replace(self, u):
        """Overwrite the current iterate; history and iteration count are kept."""
        self._check_ready()
        self.u[:] = self._as_vector(u)

    def reset(self, u):
        """Restart acceleration from u, discarding all history."""
        self._check_ready()
        self.u[:] = self._as_vector(u)
        self.iteration = 0
        self.col_idx = 0

    # ---- accelerated step ----
    def compute(self, g):
        """
        Accelerated step from the map evaluated at the current iterate.

        Args:
            g: g(u) for the current iterate u, length d

        Returns:
            Next iterate at which to evaluate the map (an owned copy)
        """
        self._check_ready()
        G = self._as_vector(g)
        np.subtract(G, self.u, out=self.F)
        F = self.F
        j = self.col_idx

        if self.iteration == 0:
            # seeds, completed into increments on the next call
            self.dF[:, 0] = -F
            self.dG[:, 0] = -G
            self.u[:] = G
        else:
            self.dF[:, j] += F
            self.dG[:, j] += G

            s = max(EPS, float(np.linalg.norm(self.dF[:, j])))
            self.scale[j] = s
            self.dF[:, j] /= s

            m_k = min(self.m, self.iteration)

            if m_k == 1:
                self.theta[0] = 0.0
                dF_sqrnorm = float(self.dF[:, j] @ self.dF[:, j])
                self.M[0, 0] = dF_sqrnorm
                dF_norm = dF_sqrnorm ** 0.5
                if dF_norm > EPS:
                    # theta = (dF . F) / (dF . dF)
                    self.theta[0] = (self.dF[:, j] / dF_norm) @ (F / dF_norm)
            else:
                dF_active = self.dF[:, :m_k]
                inner = dF_active.T @ self.dF[:, j]
                self.M[j, :m_k] = inner
                self.M[:m_k, j] = inner
                rhs = dF_active.T @ F
                self.theta[:m_k] = solve_normal_equations(self.M[:m_k, :m_k], rhs)

            # rescale theta back to unnormalized dF columns
            self.u[:] = G - self.dG[:, :m_k] @ (self.theta[:m_k] / self.scale[:m_k])

            self.col_idx = (j + 1) % self.m
            self.dF[:, self.col_idx] = -F
            self.dG[:, self.col_idx] = -G

        self.iteration += 1
        return self.u.copy()

    # ---- introspection ----
    @property
    def ready(self):
        return self.iteration >= 0

    @property
    def window(self):
        """Number of history columns the next compute() will mix."""
        self._check_ready()
        return min(self.m, self.iteration)

    @property
    def current(self):
        self._check_ready()
        return self.u.copy()

    # ---- helpers ----
    def _check_ready(self):
        if self.iteration < 0:
            raise RuntimeError("AndersonAcceleration used before init()")

    def _as_vector(self, v):
        v = np.asarray(v, dtype=self.dtype).ravel()
        if v.shape[0] != self.d:
            raise ValueError(f"expected a vector of length {self.d}, got {v.shape[0]}")
        return v
