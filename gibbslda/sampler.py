import threading
import time
import warnings
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .base import BaseGibbsParamTopicModel
from .errors import CancelledWarning, InvalidConfig
from .formatted_logger import formatted_logger
from .posterior import PosteriorEstimator, estimate_phi, estimate_theta
from .utils import sampling_from_dist

logger = formatted_logger('GibbsSampler')


def check_iterations(max_iter, burnin):
    """ Raise InvalidConfig unless `max_iter` is a positive integer and `burnin` an integer below it
    """
    if isinstance(max_iter, bool) or not isinstance(max_iter, (int, np.integer)) or max_iter < 1:
        raise InvalidConfig('number of iterations must be a positive integer, got %r' % (max_iter,))
    if isinstance(burnin, bool) or not isinstance(burnin, (int, np.integer)):
        raise InvalidConfig('burnin must be an integer, got %r' % (burnin,))
    if burnin >= max_iter:
        raise InvalidConfig('burnin (%d) must be smaller than the number of iterations (%d)' % (burnin, max_iter))


class GibbsSampler(BaseGibbsParamTopicModel):
    """
    Latent dirichlet allocation with collapsed Gibbs sampling

    Documents are split into `n_workers` contiguous shards. During a sweep
    each shard resamples its tokens against a private copy of the topic-word
    counts; the copies' deltas are added back to the shared tables in shard
    order once every shard has finished. With one worker this is the exact
    sequential sampler.

    Each shard draws from its own random stream spawned from `seed`, so a
    fixed (seed, n_workers) pair reproduces the chain exactly.

    The token loop holds the GIL, so several workers give the reproducible
    sharded merge order, not a speedup; each shard also copies TW per sweep.

    Attributes
    ----------
    topic_assignment:
        list of topic assignment for each word token
    callbacks: list of SamplerCallback
        side computations run between sweeps
    iteration: int
        number of completed sweeps
    """

    def __init__(self, n_doc, n_voca, n_topic, alpha=0.1, beta=0.05, **kwargs):
        self.seed = kwargs.pop('seed', None)
        n_workers = kwargs.pop('n_workers', 1)
        self.callbacks = list(kwargs.pop('callbacks', ()))
        self.cancel_event = kwargs.pop('cancel_event', None)
        self.timeout = kwargs.pop('timeout', None)
        super(GibbsSampler, self).__init__(n_doc=n_doc, n_voca=n_voca, n_topic=n_topic, alpha=alpha, beta=beta,
                                           **kwargs)

        if isinstance(n_workers, bool) or not isinstance(n_workers, (int, np.integer)) or n_workers < 1:
            raise InvalidConfig('n_workers must be a positive integer, got %r' % (n_workers,))
        if self.timeout is not None and not self.timeout > 0:
            raise InvalidConfig('timeout must be positive, got %r' % (self.timeout,))
        self.n_workers = int(n_workers)
        self.shards = np.array_split(np.arange(self.n_doc), self.n_workers)
        self.rngs = [np.random.default_rng(s) for s in np.random.SeedSequence(self.seed).spawn(self.n_workers)]
        self.iteration = 0
        self.cancelled = False

    def random_init(self, docs):
        """

        Parameters
        ----------
        docs: list, size=n_doc
            word ids of every token, document by document

        """
        self.topic_assignment = [None] * self.n_doc
        for shard, rng in zip(self.shards, self.rngs):
            for di in shard:
                doc = docs[di]
                topics = rng.integers(self.n_topic, size=len(doc))
                self.topic_assignment[di] = topics

                np.add.at(self.TW, (topics, doc), 1)
                self.DT[di] += np.bincount(topics, minlength=self.n_topic)
        self.sum_T = self.TW.sum(1)

    def train(self, count_matrix, max_iter=100, burnin=-1):
        """ Gibbs sampling for LDA

        Parameters
        ----------
        count_matrix: CountMatrix
            shape must be (n_doc, n_voca)
        max_iter: int
            number of Gibbs sampling sweeps
        burnin: int
            sweeps after this index are averaged into the estimates; negative
            to use the last sweep only

        Returns
        -------
        DT, TW, sum_T: ndarray
            the count tables after the last completed sweep
        estimator: PosteriorEstimator
            holding the accumulated snapshots
        """
        check_iterations(max_iter, burnin)
        if count_matrix.shape != (self.n_doc, self.n_voca):
            raise InvalidConfig('count matrix shape %s does not match sampler shape %s'
                                % (count_matrix.shape, (self.n_doc, self.n_voca)))

        docs = count_matrix.token_lists()
        self.random_init(docs)
        estimator = PosteriorEstimator(burnin)

        start = time.time()
        executor = ThreadPoolExecutor(max_workers=self.n_workers) if self.n_workers > 1 else None
        try:
            for iteration in range(1, max_iter + 1):
                if self._stop_requested(start):
                    self._warn_cancelled(iteration - 1, max_iter)
                    break
                tic = time.time()

                self.sweep(docs, executor)
                self.iteration = iteration

                if estimator.is_sampling(iteration):
                    self.accumulate(estimator)
                for callback in self.callbacks:
                    if callback.should_run(iteration):
                        callback(self, iteration)

                if self.verbose:
                    logger.info('[ITER] %d,\telapsed time:%.2f', iteration, time.time() - tic)
        finally:
            if executor is not None:
                executor.shutdown()

        return self.DT, self.TW, self.sum_T, estimator

    def sweep(self, docs, executor=None):
        """ Resample every token once, then merge the shards' count deltas in shard order
        """
        jobs = list(zip(self.shards, self.rngs))
        if executor is None:
            deltas = [self._sweep_shard(docs, shard, rng) for shard, rng in jobs]
        else:
            deltas = list(executor.map(lambda job: self._sweep_shard(docs, *job), jobs))

        for delta in deltas:
            if delta is not None:
                self.TW += delta[0]
                self.sum_T += delta[1]

    def _sweep_shard(self, docs, shard, rng):
        TW = self.TW.copy()
        sum_T = self.sum_T.copy()
        beta = self.beta
        beta_sum = beta.sum()
        alpha = self.alpha

        for di in shard:
            doc = docs[di]
            topics = self.topic_assignment[di]
            DT = self.DT[di]
            for wi in range(len(doc)):
                word = doc[wi]
                old_topic = topics[wi]

                TW[old_topic, word] -= 1
                sum_T[old_topic] -= 1
                DT[old_topic] -= 1

                # compute conditional probability of a topic of current word wi
                prob = (TW[:, word] + beta[word]) / (sum_T + beta_sum) * (DT + alpha)

                new_topic = sampling_from_dist(prob, rng)

                topics[wi] = new_topic
                TW[new_topic, word] += 1
                sum_T[new_topic] += 1
                DT[new_topic] += 1

        return TW - self.TW, sum_T - self.sum_T

    def accumulate(self, estimator):
        estimator.accumulate(self.DT, self.alpha, self.TW, self.beta)

    def current_phi(self):
        return estimate_phi(self.TW, self.beta)

    def current_theta(self):
        return estimate_theta(self.DT, self.alpha)

    def cancel(self):
        """ Ask the sampler to stop; honoured before the next sweep starts
        """
        if self.cancel_event is None:
            self.cancel_event = threading.Event()
        self.cancel_event.set()

    def _stop_requested(self, start):
        if self.cancel_event is not None and self.cancel_event.is_set():
            return True
        return self.timeout is not None and time.time() - start >= self.timeout

    def _warn_cancelled(self, completed, max_iter):
        self.cancelled = True
        message = 'sampling stopped after %d of %d sweeps' % (completed, max_iter)
        logger.warning(message)
        warnings.warn(message, CancelledWarning, stacklevel=3)


class FoldInSampler(GibbsSampler):
    """ Gibbs sampler for unseen documents against a trained topic-word distribution

    Only the document-topic counts are resampled; `phi` stays fixed, so shards
    share nothing mutable and no deltas are merged.

    Attributes
    ----------
    phi: ndarray, shape (n_topic, n_voca)
    """

    def __init__(self, n_doc, phi, alpha, beta, **kwargs):
        n_topic, n_voca = phi.shape
        super(FoldInSampler, self).__init__(n_doc=n_doc, n_voca=n_voca, n_topic=n_topic, alpha=alpha, beta=beta,
                                            **kwargs)
        self.phi = phi
        self.TW = None
        self.sum_T = None

    def random_init(self, docs):
        self.topic_assignment = [None] * self.n_doc
        for shard, rng in zip(self.shards, self.rngs):
            for di in shard:
                topics = rng.integers(self.n_topic, size=len(docs[di]))
                self.topic_assignment[di] = topics
                self.DT[di] += np.bincount(topics, minlength=self.n_topic)

    def _sweep_shard(self, docs, shard, rng):
        phi = self.phi
        alpha = self.alpha

        for di in shard:
            doc = docs[di]
            topics = self.topic_assignment[di]
            DT = self.DT[di]
            for wi in range(len(doc)):
                word = doc[wi]
                old_topic = topics[wi]
                DT[old_topic] -= 1

                prob = phi[:, word] * (DT + alpha)
                new_topic = sampling_from_dist(prob, rng)

                topics[wi] = new_topic
                DT[new_topic] += 1

        return None

    def accumulate(self, estimator):
        estimator.accumulate(self.DT, self.alpha)

    def current_phi(self):
        return self.phi
