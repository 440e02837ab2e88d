import warnings
from enum import Enum

import numpy as np

from .corpus import CountMatrix
from .errors import EmptyIntersection, InvalidConfig
from .formatted_logger import formatted_logger
from .sampler import FoldInSampler, check_iterations
from .utils import normalize_rows

logger = formatted_logger('Predictor')


class PredictMethod(Enum):
    GIBBS = 'gibbs'
    DOT = 'dot'


def predict(model, count_matrix, method=PredictMethod.GIBBS, iterations=None, burnin=-1, seed=None, n_workers=1):
    """ Infer document-topic distributions of unseen documents

    Parameters
    ----------
    model: LdaModel
    count_matrix: CountMatrix or array-like
        new documents; a bare matrix must have the model's vocabulary as columns
    method: PredictMethod or str
        'gibbs' folds the documents in with a Gibbs chain over fixed phi;
        'dot' projects term frequencies through phi in one matrix product
    iterations: int
        sweeps of the fold-in chain, required for 'gibbs', ignored for 'dot'
    burnin: int
        burn-in of the fold-in chain, same rule as in training
    seed: int
    n_workers: int

    Returns
    -------
    theta: ndarray, shape (n_new_doc, n_topic)
    """
    try:
        method = PredictMethod(method)
    except ValueError:
        raise InvalidConfig('unknown prediction method %r, expected one of %s'
                            % (method, ', '.join(m.value for m in PredictMethod)))

    if not isinstance(count_matrix, CountMatrix):
        count_matrix = CountMatrix(count_matrix, vocabulary=model.vocabulary)
    restricted, shared = count_matrix.restrict(model.vocabulary)

    if method is PredictMethod.GIBBS:
        return _predict_gibbs(model, restricted, iterations, burnin, seed, n_workers)
    return _predict_dot(model, restricted, shared)


def _warn_empty(count_matrix, empty, fallback):
    message = '%d document(s) share no terms with the model, returning %s: %s' % (
        len(empty), fallback, ', '.join(count_matrix.doc_ids[empty[:10]].astype(str)))
    logger.warning(message)
    warnings.warn(message, EmptyIntersection, stacklevel=4)


def _predict_dot(model, restricted, shared):
    shared_words = np.flatnonzero(shared)
    counts = restricted.counts[:, shared_words]
    phi = model.phi[:, shared_words]

    empty = np.flatnonzero(np.asarray(counts.sum(1)).ravel() == 0)
    if len(empty):
        _warn_empty(restricted, empty, 'a uniform distribution')

    # columns outside the shared vocabulary are all zero, so row sums are unchanged
    tf = restricted.row_normalized()[:, shared_words]
    theta = normalize_rows(tf.dot(phi.T))
    theta[empty] = 1. / model.n_topic
    return theta


def _predict_gibbs(model, restricted, iterations, burnin, seed, n_workers):
    if iterations is None:
        raise InvalidConfig('iterations is required for gibbs prediction')
    check_iterations(iterations, burnin)

    empty = np.flatnonzero(restricted.doc_lengths() == 0)
    if len(empty):
        _warn_empty(restricted, empty, 'the normalised alpha prior')

    sampler = FoldInSampler(restricted.n_doc, model.phi, model.alpha, model.beta, seed=seed, n_workers=n_workers)
    DT, _, _, estimator = sampler.train(restricted, iterations, burnin)
    _, theta = estimator.finalize(DT, sampler.alpha)
    return theta
