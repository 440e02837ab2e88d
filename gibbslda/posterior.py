import numpy as np

from .utils import normalize_rows


def estimate_phi(TW, beta):
    """ posterior mean of the topic-word distributions, shape (n_topic, n_voca)
    """
    return normalize_rows(TW + beta[np.newaxis, :])


def estimate_theta(DT, alpha):
    """ posterior mean of the document-topic distributions, shape (n_doc, n_topic)
    """
    return normalize_rows(DT + alpha[np.newaxis, :])


class PosteriorEstimator():
    """ Turns count tables into phi and theta, averaging over sweeps after burn-in

    Every sweep strictly after `burnin` contributes one snapshot, which is the
    count table plus its prior, row-normalised. The final estimate is the mean
    of the snapshots. With a negative `burnin` nothing is accumulated and the
    estimate comes from the final counts only.

    Attributes
    ----------
    burnin: int
    n_sample: int
        number of snapshots accumulated so far
    """

    def __init__(self, burnin=-1):
        self.burnin = burnin
        self.n_sample = 0
        self.phi_sum = None
        self.theta_sum = None

    def is_sampling(self, iteration):
        return 0 <= self.burnin < iteration

    def accumulate(self, DT, alpha, TW=None, beta=None):
        theta = estimate_theta(DT, alpha)
        if self.theta_sum is None:
            self.theta_sum = np.zeros_like(theta)
        self.theta_sum += theta

        if TW is not None:
            phi = estimate_phi(TW, beta)
            if self.phi_sum is None:
                self.phi_sum = np.zeros_like(phi)
            self.phi_sum += phi
        self.n_sample += 1

    def finalize(self, DT, alpha, TW=None, beta=None):
        """ Return (phi, theta)

        The mean of the accumulated snapshots when there are any, otherwise the
        estimate from the given counts. phi is None when no topic-word table
        is involved.
        """
        if self.n_sample > 0:
            theta = self.theta_sum / self.n_sample
            phi = None if self.phi_sum is None else self.phi_sum / self.n_sample
            return phi, theta

        theta = estimate_theta(DT, alpha)
        phi = None if TW is None else estimate_phi(TW, beta)
        return phi, theta
