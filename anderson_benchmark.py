"""
Anderson acceleration benchmark script.

Compares:
- Plain fixed-point iteration u <- g(u)
- Anderson(m): accelerated iteration for several window sizes m
- Anderson(m) + energy safeguard (gradient-descent problem only)

Problems:
- linear:    g(u) = A u + b with spectral radius rho
- quadratic: gradient descent on 0.5 u^T Q u - c^T u with condition number cond
- tanh:      g(u) = tanh(A u + b), ||A||_2 < 1
"""

import numpy as np
import matplotlib.pyplot as plt
import time

from accelerator.fixed_point import fixed_point_plain, fixed_point_anderson
from utils.fixed_point_maps import (
    create_linear_test_problem,
    create_quadratic_test_problem,
    create_tanh_test_problem,
)


def make_problem(kind, d, seed):
    """Return (g, energy, u_star) for the named problem kind."""
    if kind == 'linear':
        prob, u_star = create_linear_test_problem(d, rho=0.95, seed=seed)
        return prob.g, None, u_star
    elif kind == 'quadratic':
        prob, u_star = create_quadratic_test_problem(d, cond=1e3, seed=seed)
        return prob.g, prob.energy, u_star
    elif kind == 'tanh':
        prob = create_tanh_test_problem(d, contraction=0.95, seed=seed)
        return prob.g, None, None
    else:
        raise ValueError("kind must be 'linear', 'quadratic' or 'tanh'")


def run_anderson_benchmark(kind='quadratic', d=200, windows=(1, 2, 5, 10, 20),
                           max_iters=2000, tol=1e-10, seed=0, verbose=False):
    """
    Run benchmark comparing plain iteration and Anderson(m).

    Args:
        kind: Problem type ('linear', 'quadratic' or 'tanh')
        d: Problem dimension
        windows: Anderson window sizes to compare
        max_iters: Maximum iterations for all methods
        tol: Residual tolerance ||g(u) - u||
        seed: Random seed for reproducibility
        verbose: Print detailed progress

    Returns:
        results: Dictionary with final iterate, history and timing for each method
    """
    print(f"\n=== Anderson Acceleration Benchmark ===")
    print(f"Problem: {kind}, d={d}, windows={list(windows)}, max_iters={max_iters}, tol={tol:.0e}")

    g, energy, u_star = make_problem(kind, d, seed)
    u0 = np.zeros(d)
    print("-" * 70)

    results = {'problem': {'kind': kind, 'u_star': u_star}}

    # ---- plain iteration ----
    print("Running plain fixed-point iteration...")
    t0 = time.perf_counter()
    u, hist = fixed_point_plain(g, u0, max_iters=max_iters, tol=tol, verbose=verbose)
    results['plain'] = {'u': u, 'hist': hist, 'time': time.perf_counter() - t0}

    # ---- Anderson(m) ----
    for m in windows:
        print(f"Running Anderson({m})...")
        t0 = time.perf_counter()
        u, hist = fixed_point_anderson(g, u0, m=m, max_iters=max_iters, tol=tol,
                                       verbose=verbose)
        results[f'AA({m})'] = {'u': u, 'hist': hist, 'time': time.perf_counter() - t0}

    # ---- Anderson(m) with energy safeguard ----
    if energy is not None:
        m = max(windows)
        print(f"Running Anderson({m}) + energy safeguard...")
        t0 = time.perf_counter()
        u, hist = fixed_point_anderson(g, u0, m=m, max_iters=max_iters, tol=tol,
                                       energy=energy, verbose=verbose)
        results[f'AA({m})+E'] = {'u': u, 'hist': hist, 'time': time.perf_counter() - t0}

    # Print summary
    print("\n" + "=" * 70)
    print("BENCHMARK SUMMARY")
    print("=" * 70)
    print(f"{'Method':<16} {'||F||':<12} {'||u-u*||':<12} {'Iters':<8} {'Rejected':<10} {'Time [s]':<10}")
    print("-" * 70)
    for name, res in results.items():
        if name == 'problem':
            continue
        hist = res['hist']
        err = np.linalg.norm(res['u'] - u_star) if u_star is not None else float('nan')
        rejected = sum(1 for h in hist if len(h) > 3 and not h[3])
        print(f"{name:<16} {hist[-1][1]:<12.3e} {err:<12.3e} {len(hist):<8} {rejected:<10} {res['time']:<10.3f}")
    print("=" * 70)

    return results


def plot_results(results, fname=None):
    """Plot residual vs iterations and residual vs time for every method."""

    def extract_arrays(hist):
        iters = np.array([h[0] for h in hist])
        res = np.array([h[1] for h in hist])
        times = np.array([h[2] for h in hist])
        return iters, res, times

    plt.style.use('default')
    plt.rcParams.update({
        'font.size': 12,
        'font.weight': 'bold',
        'axes.labelweight': 'bold',
        'axes.titleweight': 'bold',
        'figure.titleweight': 'bold'
    })

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    kind = results['problem']['kind']

    for name, res in results.items():
        if name == 'problem':
            continue
        it, r, t = extract_arrays(res['hist'])
        style = 'k-' if name == 'plain' else '-'
        axes[0].semilogy(it, r, style, linewidth=2, label=name)
        axes[1].loglog(np.maximum(t, 1e-6), r, style, linewidth=2, label=name)

    ax = axes[0]
    ax.set_xlabel('Iterations', fontweight='bold')
    ax.set_ylabel(r'$\|g(u_k) - u_k\|_2$', fontweight='bold')
    ax.set_title(f'{kind}: residual vs iterations', fontweight='bold')
    ax.grid(True, alpha=0.3, which='both', ls=':')
    ax.legend()

    ax = axes[1]
    ax.set_xlabel('Time [seconds]', fontweight='bold')
    ax.set_ylabel(r'$\|g(u_k) - u_k\|_2$', fontweight='bold')
    ax.set_title(f'{kind}: residual vs time (loglog)', fontweight='bold')
    ax.grid(True, alpha=0.3, which='both', ls=':')
    ax.legend()

    plt.tight_layout()

    if fname is None:
        import os
        os.makedirs("figs", exist_ok=True)
        fname = f"figs/anderson_{kind}.pdf"
    plt.savefig(fname, bbox_inches="tight")
    plt.show()


if __name__ == "__main__":
    for kind in ['linear', 'quadratic', 'tanh']:
        results = run_anderson_benchmark(kind=kind, d=200, windows=(1, 2, 5, 10, 20),
                                         max_iters=2000, tol=1e-10, seed=0)
        plot_results(results)
