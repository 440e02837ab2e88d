import numpy as np

from .errors import InvalidConfig
from .utils import as_prior


class BaseTopicModel():
    """
    Attributes
    ----------
    n_doc: int
        the number of total documents in the corpus
    n_voca: int
        the vocabulary size of the corpus
    verbose: boolean
        if True, log each iteration step while inference.
    """
    def __init__(self, n_doc, n_voca, **kwargs):
        self.n_doc = n_doc
        self.n_voca = n_voca
        self.verbose = kwargs.pop('verbose', False)
        if kwargs:
            raise InvalidConfig('unknown options: %s' % ', '.join(sorted(kwargs)))


class BaseGibbsParamTopicModel(BaseTopicModel):
    """ Base class of parametric topic models with Gibbs sampling inference

    The count tables hold raw token counts; the Dirichlet priors are added
    where probabilities are computed.

    Attributes
    ----------
    n_topic: int
        a number of topics to be inferred through the Gibbs sampling
    TW: ndarray, shape (n_topic, n_voca)
        topic-word matrix, keeps the number of assigned word tokens for each topic-word pair
    DT: ndarray, shape (n_doc, n_topic)
        document-topic matrix, keeps the number of assigned word tokens for each document-topic pair
    sum_T: ndarray, shape (n_topic)
        number of word tokens assigned for each topic
    alpha: ndarray, shape (n_topic)
        parameter of Dirichlet prior for document-topic distribution
    beta: ndarray, shape (n_voca)
        parameter of Dirichlet prior for topic-word distribution
    """

    def __init__(self, n_doc, n_voca, n_topic, alpha, beta, **kwargs):
        super(BaseGibbsParamTopicModel, self).__init__(n_doc=n_doc, n_voca=n_voca, **kwargs)
        if isinstance(n_topic, bool) or not isinstance(n_topic, (int, np.integer)) or n_topic < 2:
            raise InvalidConfig('number of topics must be an integer >= 2, got %r' % (n_topic,))
        self.n_topic = int(n_topic)
        self.TW = np.zeros([self.n_topic, self.n_voca], dtype=np.int64)
        self.DT = np.zeros([self.n_doc, self.n_topic], dtype=np.int64)
        self.sum_T = np.zeros(self.n_topic, dtype=np.int64)

        self.alpha = as_prior(alpha, self.n_topic, 'alpha')
        self.beta = as_prior(beta, self.n_voca, 'beta')

        self.topic_assignment = list()
