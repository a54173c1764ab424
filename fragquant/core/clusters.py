# -*- coding: utf-8 -*-

# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Group transcripts into clusters of shared ambiguous alignments.

Two transcripts belong to the same cluster when a chain of fragments links
them, i.e. they are in one connected component of the graph whose edges are
fragments aligning to both.
"""

import numpy as np
import scipy.sparse
from scipy.sparse.csgraph import connected_components

from ..utils.logmath import log_sum
from .model import Cluster


def cluster_members(incidence):
    """Transcript indices of every cluster.

    Args:
        incidence: Binary N x K csr matrix, fragments by transcripts.

    Returns:
        List of member lists, one per connected component in label order.
        Members are in increasing index order; transcripts without hits form
        singleton clusters.
    """
    if incidence.shape[1] == 0:
        return []
    shared = (incidence.T @ incidence).tocsr()
    n_clusters, labels = connected_components(shared, directed=False)
    order = np.argsort(labels, kind='stable')
    bounds = np.cumsum(np.bincount(labels, minlength=n_clusters))[:-1]
    return [group.tolist() for group in np.split(order, bounds)]


def build_clusters(hits, transcripts):
    """Build :class:`Cluster` objects and refresh per-transcript counts.

    Sets ``unique_count`` (fragments aligning only to that transcript) and
    ``total_count`` (all fragments aligning to it) on every transcript. Each
    cluster's ``num_hits`` is the number of fragments touching any member and
    its ``log_mass`` the log-sum of the members' masses.

    Args:
        hits: N x K sparse (or dense) fragment/transcript incidence matrix.
        transcripts: Transcript arena of length K.

    Returns:
        List of clusters, ordered by component label.
    """
    incidence = scipy.sparse.csr_matrix((scipy.sparse.csr_matrix(hits) > 0).astype(np.float64))
    if incidence.shape[1] != len(transcripts):
        raise ValueError(
            f'Hit matrix has {incidence.shape[1]} columns but there are {len(transcripts)} transcripts')

    per_fragment = incidence.getnnz(axis=1)
    total = incidence.getnnz(axis=0)
    unique = incidence[np.where(per_fragment == 1)[0], :].getnnz(axis=0)
    for t, u, n in zip(transcripts, unique, total):
        t.unique_count = int(u)
        t.total_count = int(n)

    clusters = []
    for members in cluster_members(incidence):
        num_hits = int(np.count_nonzero(incidence[:, members].getnnz(axis=1)))
        clusters.append(Cluster(
            members=members,
            log_mass=log_sum(transcripts[i].mass for i in members),
            num_hits=num_hits,
        ))
    return clusters
