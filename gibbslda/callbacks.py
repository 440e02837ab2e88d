import numpy as np

from .diagnostics import log_likelihood
from .dirichlet import refit_alpha
from .errors import InvalidConfig
from .formatted_logger import formatted_logger

logger = formatted_logger('GibbsSampler')


class SamplerCallback():
    """ Side computation invoked by the sampler between two sweeps

    Attributes
    ----------
    period: int
        the callback runs after every `period`-th sweep
    """

    def __init__(self, period=10):
        if isinstance(period, bool) or not isinstance(period, (int, np.integer)) or period < 1:
            raise InvalidConfig('callback period must be a positive integer, got %r' % (period,))
        self.period = int(period)

    def should_run(self, iteration):
        return iteration % self.period == 0

    def __call__(self, sampler, iteration):
        raise NotImplementedError


class AlphaOptimizer(SamplerCallback):
    """ Refit the document-topic prior from the current document-topic counts

    Attributes
    ----------
    history: list of (iteration, alpha)
    """

    def __init__(self, period=10, **kwargs):
        super(AlphaOptimizer, self).__init__(period)
        self.refit_kwargs = kwargs
        self.history = list()

    def __call__(self, sampler, iteration):
        sampler.alpha = refit_alpha(sampler.alpha, sampler.DT, **self.refit_kwargs)
        self.history.append((iteration, sampler.alpha.copy()))
        logger.info('[ALPHA] %d,\tsum(alpha):%.4f', iteration, sampler.alpha.sum())


class LikelihoodTracer(SamplerCallback):
    """ Record the log-likelihood of the training counts under the current estimates

    Attributes
    ----------
    trace: list of (iteration, log_likelihood)
    """

    def __init__(self, count_matrix, period=10):
        super(LikelihoodTracer, self).__init__(period)
        self.count_matrix = count_matrix
        self.trace = list()

    def __call__(self, sampler, iteration):
        ll = log_likelihood(self.count_matrix, sampler.current_phi(), sampler.current_theta())
        self.trace.append((iteration, ll))
        logger.info('[ITER] %d,\tlog_likelihood:%.2f', iteration, ll)
