import numpy as np
import pytest

from gibbslda import CountMatrix, EmptyIntersection, InvalidConfig, PredictMethod, predict
from gibbslda.utils import normalize_rows


@pytest.fixture
def new_docs():
    counts = np.array([
        [3, 1, 0, 0, 2],
        [0, 0, 4, 1, 0],
        [1, 0, 0, 0, 0],
        [0, 0, 0, 0, 0],
    ])
    return CountMatrix(counts, doc_ids=['x0', 'x1', 'x2', 'x3'], vocabulary=['a0', 'a1', 'b3', 'b4', 'zz'])


def test_dot_is_normalised_projection(separable_model, new_docs):
    with pytest.warns(EmptyIntersection):
        theta = predict(separable_model, new_docs, method='dot')

    vocabulary = separable_model.vocabulary.tolist()
    columns = [vocabulary.index(term) for term in ['a0', 'a1', 'b3', 'b4']]
    x = new_docs.counts.toarray()[:3, :4]
    expected = normalize_rows(normalize_rows(x).dot(separable_model.phi[:, columns].T))
    np.testing.assert_allclose(theta[:3], expected)


def test_empty_intersection_row_is_uniform(separable_model, new_docs):
    with pytest.warns(EmptyIntersection):
        theta = predict(separable_model, new_docs, method=PredictMethod.DOT)
    np.testing.assert_allclose(theta[3], [.5, .5])
    np.testing.assert_allclose(theta.sum(1), 1.)


def test_only_unknown_terms_is_empty(separable_model):
    docs = CountMatrix(np.array([[2, 0], [0, 1]]), vocabulary=['zz', 'a2'])
    with pytest.warns(EmptyIntersection):
        theta = predict(separable_model, docs, method='dot')
    np.testing.assert_allclose(theta[0], [.5, .5])
    assert theta[1].max() > .5


def test_gibbs_fold_in_follows_topics(separable_model, new_docs):
    with pytest.warns(EmptyIntersection):
        theta = predict(separable_model, new_docs, method='gibbs', iterations=50, burnin=10, seed=3)

    np.testing.assert_allclose(theta.sum(1), 1.)
    topic_a = separable_model.phi[:, :5].sum(1).argmax()
    assert theta[0, topic_a] > 0.8
    assert theta[1, topic_a] < 0.2
    # no usable tokens: the prior
    np.testing.assert_allclose(theta[3], separable_model.alpha / separable_model.alpha.sum())


def test_gibbs_fold_in_is_reproducible(separable_model):
    docs = CountMatrix(np.array([[1, 2, 0, 3], [4, 0, 1, 0]]), vocabulary=['a0', 'b1', 'a3', 'b2'])
    first = predict(separable_model, docs, iterations=20, seed=8, n_workers=2)
    second = predict(separable_model, docs, iterations=20, seed=8, n_workers=2)
    np.testing.assert_array_equal(first, second)


def test_bare_matrix_uses_model_vocabulary(separable_model):
    theta = predict(separable_model, np.eye(10, dtype=int), method='dot')
    assert theta.shape == (10, 2)


def test_gibbs_requires_iterations(separable_model, new_docs):
    with pytest.raises(InvalidConfig):
        predict(separable_model, new_docs, method='gibbs')


def test_unknown_method(separable_model, new_docs):
    with pytest.raises(InvalidConfig):
        predict(separable_model, new_docs, method='svd')
