import warnings

import numpy as np

from .errors import DiagnosticsWarning
from .formatted_logger import formatted_logger

logger = formatted_logger('Diagnostics')


def _degenerate(message):
    logger.warning(message)
    warnings.warn(message, DiagnosticsWarning, stacklevel=3)
    return float('nan')


def log_likelihood(count_matrix, phi, theta):
    """ log-likelihood of the observed counts under the topic reconstruction

        sum_{d,v} n_dv * log(theta[d, :] . phi[:, v])

    only the nonzero entries of the count matrix contribute.
    """
    coo = count_matrix.counts.tocoo()
    prob = np.einsum('ik,ki->i', theta[coo.row], phi[:, coo.col])
    return float(np.sum(coo.data * np.log(prob)))


def topic_coherence(count_matrix, phi, top_n=5):
    """ Mean log conditional co-occurrence probability of each topic's top terms

    For the top `top_n` terms of a topic ranked by phi, every pair (v_i, v_j)
    with v_j ranked above v_i scores

        log((D(v_i, v_j) + 1) / D(v_j))

    where D counts the documents of `count_matrix` containing all given terms.
    The topic's coherence is the mean over pairs; higher is better.

    Returns
    -------
    coherence: ndarray, shape (n_topic)
        NaN for topics that cannot be scored
    """
    n_topic, n_voca = phi.shape
    top_n = min(top_n, n_voca)
    if top_n < 2:
        _degenerate('coherence needs at least two terms per topic, got %d' % top_n)
        return np.full(n_topic, np.nan)

    occurrence = count_matrix.binarize().tocsc()
    pairs_i, pairs_j = np.tril_indices(top_n, -1)

    coherence = np.zeros(n_topic)
    for ti in range(n_topic):
        top_words = phi[ti].argsort()[::-1][:top_n]
        sub = occurrence[:, top_words]
        co_doc = sub.T.dot(sub).toarray()
        doc_freq = np.diag(co_doc)
        if np.any(doc_freq == 0):
            coherence[ti] = _degenerate('topic %d has top terms that occur in no document' % ti)
            continue
        coherence[ti] = np.mean(np.log((co_doc[pairs_i, pairs_j] + 1.) / doc_freq[pairs_j]))
    return coherence


def r_squared(count_matrix, phi, theta):
    """ Proportion of variance in the count matrix explained by the topic reconstruction

    The prediction for document d is n_d * theta[d] . phi with n_d its length;
    the baseline is the mean count vector over documents.

        R^2 = 1 - SSE / SST

    Computed from the sparse counts without materialising the dense prediction.
    """
    y = count_matrix.counts.astype(float)
    n_doc = y.shape[0]
    doc_len = count_matrix.doc_lengths().astype(float)

    sum_y2 = y.multiply(y).sum()
    y_bar = np.asarray(y.mean(0)).ravel()
    sst = sum_y2 - n_doc * np.dot(y_bar, y_bar)

    coo = y.tocoo()
    y_hat = doc_len[coo.row] * np.einsum('ik,ki->i', theta[coo.row], phi[:, coo.col])
    cross = np.dot(coo.data, y_hat)
    phi_gram = phi.dot(phi.T)
    sum_y_hat2 = np.sum(doc_len ** 2 * np.einsum('dk,kl,dl->d', theta, phi_gram, theta))
    sse = sum_y2 - 2 * cross + sum_y_hat2

    if not np.isfinite(sse) or not np.isfinite(sst) or sst <= 0:
        return _degenerate('R-squared is undefined for a count matrix with zero variance')
    return float(1. - sse / sst)
