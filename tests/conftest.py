"""
Shared synthetic corpora for the gibbslda test suite.
"""

import numpy as np
import pytest

from gibbslda import CountMatrix, fit_lda_model


def _cluster_rows(n_doc, offset, n_voca):
    rows = np.zeros([n_doc, n_voca], dtype=np.int64)
    for di in range(n_doc):
        rows[di, offset:offset + 5] = 2 + (np.arange(5) + di) % 4
    return rows


@pytest.fixture
def toy_matrix():
    """Three small documents over six terms."""
    counts = np.array([
        [2, 1, 0, 0, 1, 0],
        [0, 3, 1, 0, 0, 1],
        [1, 0, 0, 4, 2, 1],
    ])
    return CountMatrix(counts, doc_ids=['d0', 'd1', 'd2'], vocabulary=['a', 'b', 'c', 'd', 'e', 'f'])


@pytest.fixture(scope="session")
def separable_matrix():
    """Ten documents using only terms a0-a4 and ten using only terms b0-b4."""
    counts = np.vstack([_cluster_rows(10, 0, 10), _cluster_rows(10, 5, 10)])
    vocabulary = ['a%d' % i for i in range(5)] + ['b%d' % i for i in range(5)]
    doc_ids = ['A%d' % i for i in range(10)] + ['B%d' % i for i in range(10)]
    return CountMatrix(counts, doc_ids=doc_ids, vocabulary=vocabulary)


@pytest.fixture(scope="session")
def separable_model(separable_matrix):
    """Two-topic model of the separable corpus."""
    return fit_lda_model(separable_matrix, k=2, iterations=200, burnin=100, alpha=0.1, beta=0.05, seed=0)
