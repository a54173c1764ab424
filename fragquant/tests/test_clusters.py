# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Tests for cluster assembly from a fragment/transcript incidence matrix."""

import math

import numpy as np
import pytest
import scipy.sparse

from fragquant.core.clusters import build_clusters, cluster_members
from fragquant.core.model import Transcript
from fragquant.core.projection import project_clusters
from fragquant.utils.logmath import LOG_0


@pytest.fixture
def two_cluster_hits():
    """Transcripts 0-1 share fragments, 2-3 share fragments, 4 has none."""
    return scipy.sparse.csr_matrix(np.array([
        [1, 1, 0, 0, 0],   # ambiguous 0/1
        [1, 0, 0, 0, 0],   # unique 0
        [0, 1, 0, 0, 0],   # unique 1
        [0, 0, 1, 1, 0],   # ambiguous 2/3
        [0, 0, 0, 1, 0],   # unique 3
        [0, 0, 1, 0, 0],   # unique 2
        [1, 0, 0, 0, 0],   # unique 0
    ], dtype=np.float64))


@pytest.fixture
def transcripts():
    masses = [math.log(3.0), math.log(2.0), math.log(2.0), math.log(2.0), LOG_0]
    return [Transcript(f't{i}', 1000, mass=m) for i, m in enumerate(masses)]


class TestClusterMembers:
    def test_components(self, two_cluster_hits):
        assert cluster_members(two_cluster_hits) == [[0, 1], [2, 3], [4]]

    def test_identity_all_separate(self):
        members = cluster_members(scipy.sparse.csr_matrix(np.eye(4)))
        assert members == [[0], [1], [2], [3]]

    def test_chain_links_transcripts(self):
        # 0-1 and 1-2 share fragments, so 0 and 2 are clustered through 1
        hits = scipy.sparse.csr_matrix(np.array([
            [1, 1, 0, 0],
            [0, 1, 1, 0],
            [0, 0, 0, 1],
        ], dtype=np.float64))
        assert cluster_members(hits) == [[0, 1, 2], [3]]

    def test_no_transcripts(self):
        assert cluster_members(scipy.sparse.csr_matrix((3, 0))) == []


class TestBuildClusters:
    def test_counts(self, two_cluster_hits, transcripts):
        build_clusters(two_cluster_hits, transcripts)
        assert [t.unique_count for t in transcripts] == [2, 1, 1, 1, 0]
        assert [t.total_count for t in transcripts] == [3, 2, 2, 2, 0]

    def test_clusters(self, two_cluster_hits, transcripts):
        clusters = build_clusters(two_cluster_hits, transcripts)
        by_members = {tuple(c.members): c for c in clusters}
        assert set(by_members) == {(0, 1), (2, 3), (4,)}
        assert by_members[(0, 1)].num_hits == 4
        assert by_members[(2, 3)].num_hits == 3
        assert by_members[(4,)].num_hits == 0
        assert by_members[(0, 1)].log_mass == pytest.approx(math.log(5.0))
        assert by_members[(4,)].log_mass == LOG_0

    def test_clusters_partition_transcripts(self, two_cluster_hits, transcripts):
        clusters = build_clusters(two_cluster_hits, transcripts)
        members = sorted(i for c in clusters for i in c.members)
        assert members == list(range(len(transcripts)))

    def test_dense_input(self, two_cluster_hits, transcripts):
        clusters = build_clusters(two_cluster_hits.toarray(), transcripts)
        assert len(clusters) == 3

    def test_column_mismatch(self, two_cluster_hits, transcripts):
        with pytest.raises(ValueError):
            build_clusters(two_cluster_hits, transcripts[:3])

    def test_projection_over_built_clusters(self, two_cluster_hits, transcripts):
        clusters = build_clusters(two_cluster_hits, transcripts)
        project_clusters(clusters, transcripts)
        total = sum(t.projected_counts for t in transcripts)
        assert total == pytest.approx(two_cluster_hits.shape[0])
        for t in transcripts:
            assert t.unique_count - 1e-9 <= t.projected_counts <= t.total_count + 1e-9
