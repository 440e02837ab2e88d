import numpy as np

from .summary import get_top_words


def _read_only(value, dtype=None):
    if value is None:
        return None
    arr = np.array(value, dtype=dtype)
    arr.setflags(write=False)
    return arr


class LdaModel():
    """ Trained topic model, immutable once built

    Attributes
    ----------
    phi: ndarray, shape (n_topic, n_voca)
        topic-word distributions, rows sum to one
    theta: ndarray, shape (n_doc, n_topic)
        document-topic distributions of the training documents, rows sum to one
    alpha: ndarray, shape (n_topic)
        document-topic prior, after refitting when that was enabled
    beta: ndarray, shape (n_voca)
        topic-word prior
    vocabulary: ndarray, shape (n_voca)
    doc_ids: ndarray, shape (n_doc)
    log_likelihood: ndarray, shape (n_trace, 2) or None
        (iteration, log-likelihood) pairs
    coherence: ndarray, shape (n_topic) or None
    r2: float or None
    """

    _fields = ('phi', 'theta', 'alpha', 'beta', 'vocabulary', 'doc_ids', 'log_likelihood', 'coherence', 'r2')

    def __init__(self, phi, theta, alpha, beta, vocabulary, doc_ids=None,
                 log_likelihood=None, coherence=None, r2=None):
        values = dict(
            phi=_read_only(phi, float),
            theta=_read_only(theta, float),
            alpha=_read_only(alpha, float),
            beta=_read_only(beta, float),
            vocabulary=_read_only(vocabulary, str),
            doc_ids=_read_only(doc_ids, str),
            log_likelihood=None if log_likelihood is None else _read_only(np.reshape(log_likelihood, (-1, 2)), float),
            coherence=_read_only(coherence, float),
            r2=None if r2 is None else float(r2),
        )
        for key, value in values.items():
            object.__setattr__(self, key, value)

    def __setattr__(self, key, value):
        raise AttributeError('LdaModel is read-only')

    @property
    def n_topic(self):
        return self.phi.shape[0]

    @property
    def n_voca(self):
        return self.phi.shape[1]

    @property
    def diagnostics(self):
        return dict(log_likelihood=self.log_likelihood, coherence=self.coherence, r2=self.r2)

    def top_words(self, topic, n_words=10):
        return get_top_words(self.phi, self.vocabulary, topic, n_words)

    def save(self, path):
        """ write the model to a compressed .npz archive; absent diagnostics are omitted
        """
        arrays = dict()
        for key in self._fields:
            value = getattr(self, key)
            if value is not None:
                arrays[key] = np.asarray(value)
        np.savez_compressed(path, **arrays)

    @classmethod
    def load(cls, path):
        with np.load(path, allow_pickle=False) as archive:
            values = dict((key, archive[key]) for key in archive.files)
        if 'r2' in values:
            values['r2'] = float(values['r2'])
        return cls(**values)

    def __repr__(self):
        return 'LdaModel(n_topic=%d, n_voca=%d, n_doc=%d)' % (self.n_topic, self.n_voca, self.theta.shape[0])
