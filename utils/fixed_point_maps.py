"""
Fixed-point maps used to exercise the accelerator.
Contains linear, gradient-descent (quadratic energy) and nonlinear tanh maps.
"""

import numpy as np
from scipy.linalg import solve, eigvalsh


class LinearFixedPoint:
    """Affine map g(u) = A u + b, fixed point u* = (I - A)^{-1} b."""

    def __init__(self, A, b):
        """
        Initialize affine fixed-point problem.

        Args:
            A: Matrix of shape (d, d)
            b: Vector of shape (d,)
        """
        self.A = np.asarray(A, dtype=np.float64)
        self.b = np.asarray(b, dtype=np.float64)
        self.d = self.A.shape[0]
        if self.A.shape != (self.d, self.d) or self.b.shape != (self.d,):
            raise ValueError("A must be (d, d) and b must be (d,)")

    def g(self, u):
        """Map value: A u + b."""
        return self.A @ u + self.b

    def residual(self, u):
        """Residual g(u) - u."""
        return self.g(u) - u

    def fixed_point(self):
        """Solve (I - A) u = b."""
        return solve(np.eye(self.d) - self.A, self.b)

    def spectral_radius(self):
        return float(np.max(np.abs(np.linalg.eigvals(self.A))))


class QuadraticGradientMap:
    """
    Gradient step on E(u) = 0.5 u^T Q u - c^T u:
    g(u) = u - step * (Q u - c), fixed point u* = Q^{-1} c.
    """

    def __init__(self, Q, c, step=None):
        self.Q = np.asarray(Q, dtype=np.float64)
        self.c = np.asarray(c, dtype=np.float64)
        self.d = self.Q.shape[0]
        if step is None:
            # 1/L, L = largest eigenvalue of Q
            step = 1.0 / eigvalsh(self.Q)[-1]
        self.step = float(step)

    def energy(self, u):
        """Quadratic energy value."""
        return 0.5 * float(u @ (self.Q @ u)) - float(self.c @ u)

    def grad(self, u):
        return self.Q @ u - self.c

    def g(self, u):
        """Map value: one gradient descent step."""
        return u - self.step * self.grad(u)

    def residual(self, u):
        return self.g(u) - u

    def fixed_point(self):
        return solve(self.Q, self.c, assume_a='pos')


class TanhMap:
    """Nonlinear map g(u) = tanh(A u + b), a contraction when ||A||_2 < 1."""

    def __init__(self, A, b):
        self.A = np.asarray(A, dtype=np.float64)
        self.b = np.asarray(b, dtype=np.float64)
        self.d = self.A.shape[0]

    def g(self, u):
        return np.tanh(self.A @ u + self.b)

    def residual(self, u):
        return self.g(u) - u


def create_linear_test_problem(d, rho=0.9, seed=None):
    """Create an affine fixed-point problem with prescribed spectral radius.

    Args:
        d: Dimension of the problem
        rho: Spectral radius of A (0 < rho < 1 for a contraction)
        seed: Random seed for reproducibility

    Returns:
        problem: LinearFixedPoint instance
        u_star: Exact fixed point
    """
    rng = np.random.default_rng(seed)

    # A = U diag(lam) U^T with |lam| <= rho
    U, _ = np.linalg.qr(rng.standard_normal((d, d)))
    lam = rho * rng.uniform(-1.0, 1.0, d)
    lam[0] = rho
    A = U @ np.diag(lam) @ U.T
    b = rng.standard_normal(d)

    problem = LinearFixedPoint(A, b)
    return problem, problem.fixed_point()


def create_quadratic_test_problem(d, cond=100.0, seed=None):
    """Create an SPD quadratic energy with condition number cond.

    Returns:
        problem: QuadraticGradientMap instance (step = 1/L)
        u_star: Minimizer of the energy
    """
    rng = np.random.default_rng(seed)
    U, _ = np.linalg.qr(rng.standard_normal((d, d)))
    vals = np.logspace(0, np.log10(cond), d)
    Q = U @ np.diag(vals) @ U.T
    Q = 0.5 * (Q + Q.T)
    c = rng.standard_normal(d)

    problem = QuadraticGradientMap(Q, c)
    return problem, problem.fixed_point()


def create_tanh_test_problem(d, contraction=0.8, seed=None):
    """Create a tanh contraction with ||A||_2 = contraction."""
    rng = np.random.default_rng(seed)
    A = rng.standard_normal((d, d))
    A *= contraction / np.linalg.norm(A, 2)
    b = rng.standard_normal(d)
    return TanhMap(A, b)
