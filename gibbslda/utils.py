import numpy as np

from .errors import InvalidConfig


def sampling_from_dist(prob, rng):
    """ Sample index from a list of unnormalised probability distribution
        same as rng.multinomial(1, prob/np.sum(prob)).argmax()

    Parameters
    ----------
    prob: ndarray
        array of unnormalised probability distribution
    rng: numpy.random.Generator
        random stream to draw the threshold from

    Returns
    -------
    new_topic: return a sampled index
    """
    c_sum = prob.cumsum()
    thr = c_sum[-1] * rng.random()
    new_topic = int(np.searchsorted(c_sum, thr, side='right'))
    # thr can equal c_sum[-1] only through rounding
    return min(new_topic, len(prob) - 1)


def normalize_rows(mat):
    """
    returns a copy of `mat` where every row sums to one; all-zero rows stay zero
    """
    mat = np.asarray(mat, dtype=float)
    row_sum = mat.sum(1)[:, np.newaxis]
    return np.divide(mat, row_sum, out=np.zeros_like(mat), where=row_sum > 0)


def as_prior(value, size, name):
    """ Broadcast a scalar Dirichlet parameter to a vector of length `size`,
    or check an explicit vector.

    Raises
    ------
    InvalidConfig
        when the vector length differs from `size` or a component is not
        strictly positive and finite
    """
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 0:
        arr = np.repeat(float(arr), size)
    elif arr.ndim != 1 or len(arr) != size:
        raise InvalidConfig('%s must be a scalar or a vector of length %d, got shape %s'
                            % (name, size, arr.shape))
    else:
        arr = arr.copy()
    if not np.all(np.isfinite(arr)) or np.any(arr <= 0):
        raise InvalidConfig('%s must be strictly positive and finite' % name)
    return arr
