#!/usr/bin/env python3
"""
Post-install self check for the Anderson acceleration package.

Verifies the numerical stack, imports the project modules and pushes the
accelerator through a few short runs (double and single precision, replace).
"""

import sys
import importlib
import numpy as np
import matplotlib.pyplot as plt

REQUIRED = ['numpy', 'scipy', 'matplotlib']
PROJECT = ['accelerator.anderson', 'accelerator.fixed_point', 'utils.fixed_point_maps']
SCRIPTS = ['anderson_benchmark', 'demo']


def check_modules(names, title):
    """Import every module in names, report each one."""
    print(f"\n🔍 {title}")
    ok = True
    for name in names:
        try:
            importlib.import_module(name)
            print(f"  ✅ {name}")
        except ImportError as e:
            print(f"  ❌ {name}: {e}")
            ok = False
    return ok


def check_least_squares():
    """gelsy must return the minimum-norm solution of a singular system."""
    from scipy.linalg import lstsq
    M = np.array([[1.0, 1.0], [1.0, 1.0]])
    x = lstsq(M, np.array([2.0, 2.0]), lapack_driver='gelsy')[0]
    return np.allclose(x, [1.0, 1.0])


def check_secant_step(dtype):
    """g(x) = 0.5 x + 1: one-column Anderson lands on x* = 2 at the second call."""
    from accelerator.anderson import AndersonAcceleration
    aa = AndersonAcceleration(1, 1, np.zeros(1), dtype=dtype)
    u = np.zeros(1, dtype=dtype)
    for _ in range(2):
        u = aa.compute(0.5 * u + 1.0)
    tol = 1e-5 if dtype == np.float32 else 1e-12
    return u.dtype == dtype and abs(float(u[0]) - 2.0) < tol


def check_replace():
    """replace() swaps the base iterate without touching the history."""
    from accelerator.anderson import AndersonAcceleration
    aa = AndersonAcceleration(2, 2, np.zeros(2))
    aa.compute(np.array([1.0, 1.0]))
    aa.compute(np.array([1.5, 1.2]))
    dF, iteration = aa.dF.copy(), aa.iteration
    v = np.array([0.3, -0.3])
    aa.replace(v)
    kept = np.array_equal(dF, aa.dF) and aa.iteration == iteration
    g = np.array([0.4, 0.1])
    aa.compute(g)
    return kept and np.array_equal(aa.F, g - v)


def check_plotting():
    plt.figure(figsize=(4, 3))
    plt.semilogy([0, 1, 2], [1.0, 1e-3, 1e-9], 'o-')
    plt.close()
    return True


def main():
    print("🚀 Anderson acceleration: installation check")
    print("=" * 44)
    print(f"🐍 Python {sys.version.split()[0]}")
    if sys.version_info < (3, 8):
        print("⚠️  Python 3.8 or newer is expected")

    passed = check_modules(REQUIRED, "Numerical stack")
    passed &= check_modules(PROJECT, "Project modules")

    print("\n🧮 Numerical checks")
    checks = [
        ("gelsy minimum-norm solve", check_least_squares),
        ("secant step, float64", lambda: check_secant_step(np.float64)),
        ("secant step, float32", lambda: check_secant_step(np.float32)),
        ("replace keeps history", check_replace),
        ("matplotlib figure", check_plotting),
    ]
    for label, check in checks:
        try:
            ok = bool(check())
        except Exception as e:
            print(f"  ❌ {label}: {e}")
            ok = False
        else:
            print(f"  {'✅' if ok else '❌'} {label}")
        passed &= ok

    passed &= check_modules(SCRIPTS, "Scripts")

    print("\n" + "=" * 44)
    if passed:
        print("🎉 Everything works. Try:")
        print("  python demo.py")
        print("  python anderson_benchmark.py")
        print("  pytest")
    else:
        print("❌ Some checks failed, see above. Reinstall with: pip install -e .[test]")

    return passed


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
