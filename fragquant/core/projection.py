# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Cluster mass projection.

Each cluster's hit count is split among its members in proportion to their
mass. When a member's share falls outside ``[unique_count, total_count]`` the
cluster's shares are projected onto the nearest feasible point of the polytope

    { x : unique_count <= x <= total_count, sum(x) = num_hits }
"""

import logging as lg
import math

import numpy as np

from ..utils.logmath import LOG_0
from .errors import InfeasibleProjectionInput

# Relative slack allowed when checking that the box can hold the total
FEASIBILITY_RTOL = 1e-9


def project_to_polytope(shares, lower, upper, total):
    """Euclidean projection of *shares* onto a box intersected with a simplex.

    Solves ``min ||x - shares||`` subject to ``lower <= x <= upper`` and
    ``sum(x) == total``. The solution has the form ``clip(shares - lam, lower,
    upper)`` for a scalar ``lam``; the sum is piecewise linear and
    non-increasing in ``lam`` with breakpoints at ``shares - upper`` and
    ``shares - lower``, so ``lam`` is found exactly by locating the segment
    that brackets *total* and interpolating.

    Args:
        shares: Unconstrained per-member values.
        lower: Per-member lower bounds.
        upper: Per-member upper bounds.
        total: Required sum.

    Returns:
        numpy array with the projected values.

    Raises:
        InfeasibleProjectionInput: the constraints admit no solution.
    """
    y = np.asarray(shares, dtype=np.float64)
    lo = np.asarray(lower, dtype=np.float64)
    hi = np.asarray(upper, dtype=np.float64)
    total = float(total)

    if np.any(lo > hi):
        bad = np.where(lo > hi)[0].tolist()
        raise InfeasibleProjectionInput(f'Lower bound exceeds upper bound for members {bad}')
    slack = FEASIBILITY_RTOL * max(1.0, abs(total))
    if lo.sum() > total + slack:
        raise InfeasibleProjectionInput(
            f'Sum of lower bounds ({lo.sum():g}) exceeds cluster total ({total:g})')
    if hi.sum() < total - slack:
        raise InfeasibleProjectionInput(
            f'Sum of upper bounds ({hi.sum():g}) is below cluster total ({total:g})')

    if np.all(y >= lo) and np.all(y <= hi) and abs(y.sum() - total) <= slack:
        return y.copy()

    breaks = np.unique(np.concatenate([y - hi, y - lo]))
    sums = np.array([np.clip(y - b, lo, hi).sum() for b in breaks])

    # sums is non-increasing: sums[0] == hi.sum(), sums[-1] == lo.sum()
    idx = int(np.searchsorted(-sums, -total, side='left'))
    idx = min(idx, len(breaks) - 1)
    if idx == 0 or math.isclose(sums[idx], total, rel_tol=0.0, abs_tol=slack):
        lam = breaks[idx]
    else:
        b0, b1 = breaks[idx - 1], breaks[idx]
        s0, s1 = sums[idx - 1], sums[idx]
        lam = b0 + (s0 - total) * (b1 - b0) / (s0 - s1)

    return np.clip(y - lam, lo, hi)


def project_cluster(cluster, transcripts, cluster_id=None):
    """Distribute *cluster*'s hits over its members, writing ``projected_counts``.

    Args:
        cluster: :class:`Cluster` whose members index into *transcripts*.
        transcripts: Transcript arena.
        cluster_id: Label used in diagnostics only.

    Returns:
        True if the shares were projected onto the feasible polytope.

    Raises:
        InfeasibleProjectionInput: projection was required but impossible.
    """
    members = [transcripts[i] for i in cluster.members]
    for t in members:
        t.refresh_counts()

    if cluster.log_mass == LOG_0:
        lg.warning(f'Cluster {cluster_id} has 0 mass!')
        for t in members:
            t.projected_counts = 0.0
        return False

    requires_projection = False
    for t in members:
        if t.mass == LOG_0:
            t.projected_counts = 0.0
            continue
        log_cluster_fraction = t.mass - cluster.log_mass
        # exp(fraction) * hits == exp(fraction + log(hits)); exact for a lone member
        t.projected_counts = math.exp(log_cluster_fraction) * cluster.num_hits
        if t.projected_counts > t.total_counts or t.projected_counts < t.unique_counts:
            requires_projection = True

    if len(members) > 1 and requires_projection:
        # Members without mass stay pinned at zero
        active = [t for t in members if t.mass != LOG_0]
        try:
            x = project_to_polytope(
                [t.projected_counts for t in active],
                [t.unique_counts for t in active],
                [t.total_counts for t in active],
                cluster.num_hits,
            )
        except InfeasibleProjectionInput as exc:
            raise InfeasibleProjectionInput(f'Cluster {cluster_id}: {exc}') from exc
        for t, v in zip(active, x):
            t.projected_counts = float(v)
        lg.debug(f'Projected cluster {cluster_id} ({len(members)} members)')
        return True
    return False


def project_clusters(clusters, transcripts):
    """Project every cluster in order. Returns the number that needed projection."""
    nproj = 0
    for cluster_id, cluster in enumerate(clusters):
        if project_cluster(cluster, transcripts, cluster_id):
            nproj += 1
    lg.info(f'{nproj} of {len(clusters)} clusters required projection')
    return nproj
