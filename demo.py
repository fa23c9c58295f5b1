#!/usr/bin/env python3
"""
Anderson Acceleration Demo Script

A simple demonstration of plain vs. accelerated fixed-point iteration.
This script shows a quick example on each test map.
"""

import numpy as np
from accelerator.anderson import AndersonAcceleration
from accelerator.fixed_point import fixed_point_plain, fixed_point_anderson
from utils.fixed_point_maps import (
    LinearFixedPoint,
    create_quadratic_test_problem,
    create_tanh_test_problem,
)

def demo_linear():
    """Demo on a 2x2 affine map: exact after d+1 accelerated steps."""
    print("📐 Linear Map Demo (d=2, m=2)")
    print("-" * 30)

    A = np.array([[0.5, 0.2],
                  [0.1, 0.4]])
    b = np.array([1.0, 2.0])
    problem = LinearFixedPoint(A, b)
    u_star = problem.fixed_point()

    # Drive the accelerator by hand
    aa = AndersonAcceleration(2, 2, np.zeros(2))
    u = np.zeros(2)
    for k in range(3):
        u = aa.compute(problem.g(u))
        print(f"call {k + 1}: u = {u}, ||u - u*|| = {np.linalg.norm(u - u_star):.2e}")
    print()

def demo_quadratic():
    """Demo on ill-conditioned gradient descent, with and without safeguard."""
    print("📉 Gradient Descent Demo (d=100, cond=1e3)")
    print("-" * 40)

    problem, u_star = create_quadratic_test_problem(100, cond=1e3, seed=42)
    u0 = np.zeros(100)

    u_fp, hist_fp = fixed_point_plain(problem.g, u0, max_iters=2000, tol=1e-8)
    u_aa, hist_aa = fixed_point_anderson(problem.g, u0, m=10, max_iters=2000, tol=1e-8)
    u_sg, hist_sg = fixed_point_anderson(problem.g, u0, m=10, max_iters=2000, tol=1e-8,
                                         energy=problem.energy)

    print(f"Plain:          iters={len(hist_fp):5d} error={np.linalg.norm(u_fp - u_star):.2e}")
    print(f"Anderson(10):   iters={len(hist_aa):5d} error={np.linalg.norm(u_aa - u_star):.2e}")
    print(f"AA(10)+energy:  iters={len(hist_sg):5d} error={np.linalg.norm(u_sg - u_star):.2e}")
    print()

def demo_tanh():
    """Demo on a nonlinear contraction."""
    print("〰️  Nonlinear tanh Map Demo (d=50)")
    print("-" * 40)

    problem = create_tanh_test_problem(50, contraction=0.95, seed=42)
    u0 = np.zeros(50)

    u_fp, hist_fp = fixed_point_plain(problem.g, u0, tol=1e-10)
    u_aa, hist_aa = fixed_point_anderson(problem.g, u0, m=5, tol=1e-10)

    print(f"Plain:        iters={len(hist_fp):5d} ||F||={np.linalg.norm(problem.residual(u_fp)):.2e}")
    print(f"Anderson(5):  iters={len(hist_aa):5d} ||F||={np.linalg.norm(problem.residual(u_aa)):.2e}")
    print()

def main():
    """Run all demos."""
    print("🚀 Anderson Acceleration Demo")
    print("=" * 50)
    print("This demo compares plain fixed-point iteration with Anderson acceleration on:")
    print("1. A 2x2 affine map")
    print("2. Gradient descent on an ill-conditioned quadratic")
    print("3. A nonlinear tanh contraction")
    print()

    demo_linear()
    demo_quadratic()
    demo_tanh()

    print("🎉 Demo completed!")
    print("\nTo run the full benchmark with plots:")
    print("  python anderson_benchmark.py")

if __name__ == "__main__":
    main()
