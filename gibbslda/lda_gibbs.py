from enum import Enum

import numpy as np

from .callbacks import AlphaOptimizer, LikelihoodTracer
from .corpus import CountMatrix
from .diagnostics import r_squared, topic_coherence
from .errors import InvalidConfig, ModelStateError
from .formatted_logger import formatted_logger
from .model import LdaModel
from .predict import predict
from .sampler import GibbsSampler, check_iterations
from .utils import as_prior

logger = formatted_logger('GibbsLDA')


class ModelState(Enum):
    UNTRAINED = 'untrained'
    TRAINING = 'training'
    TRAINED = 'trained'
    PREDICT_READY = 'predict_ready'


class GibbsLDA():
    """
    Latent dirichlet allocation,
    Blei, David M and Ng, Andrew Y and Jordan, Michael I, 2003

    Latent Dirichlet allocation with collapsed Gibbs sampling over a sparse
    document-term count matrix. An instance is fitted once; build a new one to
    retrain.

    Attributes
    ----------
    n_topic: int
    alpha: ndarray, shape (n_topic)
        initial document-topic prior
    beta: float or ndarray
        topic-word prior, broadcast to the vocabulary at fit time
    optimize_alpha: boolean
        refit alpha every `optimize_every` sweeps
    calc_likelihood: boolean
        trace the log-likelihood every `likelihood_every` sweeps
    calc_coherence: boolean
        compute the coherence of the top `coherence_top_n` terms of each topic after training
    calc_r2: boolean
        compute R-squared of the reconstruction after training
    state: ModelState
    model: LdaModel
        the trained model, None until `fit` returns
    """

    def __init__(self, n_topic, alpha=0.1, beta=0.05, **kwargs):
        if isinstance(n_topic, bool) or not isinstance(n_topic, (int, np.integer)) or n_topic < 2:
            raise InvalidConfig('number of topics must be an integer >= 2, got %r' % (n_topic,))
        self.n_topic = int(n_topic)
        self.alpha = as_prior(alpha, self.n_topic, 'alpha')

        beta_arr = np.asarray(beta, dtype=float)
        if beta_arr.ndim > 1 or not np.all(np.isfinite(beta_arr)) or np.any(beta_arr <= 0):
            raise InvalidConfig('beta must be a strictly positive scalar or vector')
        self.beta = beta

        self.optimize_alpha = kwargs.pop('optimize_alpha', False)
        self.calc_likelihood = kwargs.pop('calc_likelihood', False)
        self.calc_coherence = kwargs.pop('calc_coherence', False)
        self.calc_r2 = kwargs.pop('calc_r2', False)
        self.coherence_top_n = kwargs.pop('coherence_top_n', 5)
        self.optimize_every = kwargs.pop('optimize_every', 10)
        self.likelihood_every = kwargs.pop('likelihood_every', 10)
        self.sampler_kwargs = dict((key, kwargs.pop(key)) for key in
                                   ('seed', 'n_workers', 'verbose', 'timeout', 'cancel_event') if key in kwargs)
        if kwargs:
            raise InvalidConfig('unknown options: %s' % ', '.join(sorted(kwargs)))

        self.state = ModelState.UNTRAINED
        self.model = None
        self.sampler = None

    def fit(self, count_matrix, max_iter=100, burnin=-1):
        """ Train the model

        Parameters
        ----------
        count_matrix: CountMatrix or array-like
            documents x terms; every row and column needs a nonzero count
        max_iter: int
            number of Gibbs sampling sweeps
        burnin: int
            average the estimates over sweeps after this index; -1 to keep the last sweep only

        Returns
        -------
        model: LdaModel
        """
        if self.state is not ModelState.UNTRAINED:
            raise ModelStateError('model is %s; create a new GibbsLDA to retrain' % self.state.value)
        check_iterations(max_iter, burnin)
        if not isinstance(count_matrix, CountMatrix):
            count_matrix = CountMatrix(count_matrix)
        count_matrix.check_nonempty()

        callbacks = list()
        optimizer = tracer = None
        if self.optimize_alpha:
            optimizer = AlphaOptimizer(self.optimize_every)
            callbacks.append(optimizer)
        if self.calc_likelihood:
            tracer = LikelihoodTracer(count_matrix, self.likelihood_every)
            callbacks.append(tracer)

        self.sampler = GibbsSampler(count_matrix.n_doc, count_matrix.n_voca, self.n_topic, self.alpha, self.beta,
                                    callbacks=callbacks, **self.sampler_kwargs)

        self.state = ModelState.TRAINING
        logger.info('[FIT] %d documents, %d terms, %d topics, %d iterations',
                    count_matrix.n_doc, count_matrix.n_voca, self.n_topic, max_iter)
        try:
            DT, TW, _, estimator = self.sampler.train(count_matrix, max_iter, burnin)
        except BaseException:
            self.state = ModelState.UNTRAINED
            raise
        phi, theta = estimator.finalize(DT, self.sampler.alpha, TW, self.sampler.beta)

        coherence = r2 = None
        if self.calc_coherence:
            coherence = topic_coherence(count_matrix, phi, self.coherence_top_n)
        if self.calc_r2:
            r2 = r_squared(count_matrix, phi, theta)

        self.model = LdaModel(phi, theta, self.sampler.alpha, self.sampler.beta, count_matrix.vocabulary,
                              doc_ids=count_matrix.doc_ids,
                              log_likelihood=None if tracer is None else tracer.trace,
                              coherence=coherence, r2=r2)
        self.state = ModelState.TRAINED
        return self.model

    def predict(self, count_matrix, method='gibbs', max_iter=None, burnin=-1):
        """ Infer theta for new documents with the trained model, see `gibbslda.predict.predict`
        """
        if self.model is None:
            raise ModelStateError('model is %s; call fit first' % self.state.value)
        self.state = ModelState.PREDICT_READY
        return predict(self.model, count_matrix, method=method, iterations=max_iter, burnin=burnin,
                       seed=self.sampler_kwargs.get('seed'), n_workers=self.sampler_kwargs.get('n_workers', 1))


def fit_lda_model(count_matrix, k, iterations, burnin=-1, alpha=0.1, beta=0.05, optimize_alpha=False,
                  calc_likelihood=False, calc_coherence=False, calc_r2=False, **kwargs):
    """ Fit an LDA model in one call

    Returns
    -------
    model: LdaModel
    """
    lda = GibbsLDA(k, alpha=alpha, beta=beta, optimize_alpha=optimize_alpha, calc_likelihood=calc_likelihood,
                   calc_coherence=calc_coherence, calc_r2=calc_r2, **kwargs)
    return lda.fit(count_matrix, max_iter=iterations, burnin=burnin)
