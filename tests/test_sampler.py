import threading
import time

import numpy as np
import pytest

from gibbslda import CancelledWarning, GibbsSampler, InvalidConfig
from gibbslda.callbacks import SamplerCallback
from gibbslda.posterior import estimate_theta


class ThetaRecorder(SamplerCallback):
    def __init__(self):
        super(ThetaRecorder, self).__init__(period=1)
        self.snapshots = dict()

    def __call__(self, sampler, iteration):
        self.snapshots[iteration] = estimate_theta(sampler.DT, sampler.alpha)


class CancelAt(SamplerCallback):
    def __init__(self, iteration):
        super(CancelAt, self).__init__(period=1)
        self.at = iteration

    def __call__(self, sampler, iteration):
        if iteration == self.at:
            sampler.cancel()


def _sampler(matrix, **kwargs):
    return GibbsSampler(matrix.n_doc, matrix.n_voca, 3, alpha=0.5, beta=0.1, **kwargs)


@pytest.mark.parametrize('n_workers', [1, 2])
def test_count_tables_stay_consistent(toy_matrix, n_workers):
    sampler = _sampler(toy_matrix, seed=3, n_workers=n_workers)
    DT, TW, sum_T, _ = sampler.train(toy_matrix, max_iter=15)

    np.testing.assert_array_equal(DT.sum(1), toy_matrix.doc_lengths())
    np.testing.assert_array_equal(TW.sum(0), toy_matrix.term_totals())
    np.testing.assert_array_equal(sum_T, TW.sum(1))
    assert DT.min() >= 0 and TW.min() >= 0
    for di, topics in enumerate(sampler.topic_assignment):
        np.testing.assert_array_equal(np.bincount(topics, minlength=3), DT[di])


@pytest.mark.parametrize('n_workers', [1, 2, 3])
def test_same_seed_same_workers_reproduces_chain(separable_matrix, n_workers):
    runs = list()
    for _ in range(2):
        sampler = _sampler(separable_matrix, seed=11, n_workers=n_workers)
        DT, TW, _, estimator = sampler.train(separable_matrix, max_iter=20, burnin=5)
        runs.append(estimator.finalize(DT, sampler.alpha, TW, sampler.beta))
    np.testing.assert_array_equal(runs[0][0], runs[1][0])
    np.testing.assert_array_equal(runs[0][1], runs[1][1])


def test_theta_is_mean_of_snapshots_after_burnin(toy_matrix):
    recorder = ThetaRecorder()
    sampler = _sampler(toy_matrix, seed=5, callbacks=[recorder])
    DT, TW, _, estimator = sampler.train(toy_matrix, max_iter=5, burnin=2)
    _, theta = estimator.finalize(DT, sampler.alpha, TW, sampler.beta)

    expected = np.mean([recorder.snapshots[i] for i in (3, 4, 5)], axis=0)
    np.testing.assert_allclose(theta, expected)
    assert estimator.n_sample == 3


def test_negative_burnin_uses_last_sweep(toy_matrix):
    recorder = ThetaRecorder()
    sampler = _sampler(toy_matrix, seed=5, callbacks=[recorder])
    DT, TW, _, estimator = sampler.train(toy_matrix, max_iter=4, burnin=-1)
    _, theta = estimator.finalize(DT, sampler.alpha, TW, sampler.beta)

    assert estimator.n_sample == 0
    np.testing.assert_allclose(theta, recorder.snapshots[4])


def test_cancel_stops_at_sweep_boundary(toy_matrix):
    sampler = _sampler(toy_matrix, seed=1, callbacks=[CancelAt(3)])
    with pytest.warns(CancelledWarning):
        DT, _, _, _ = sampler.train(toy_matrix, max_iter=50)
    assert sampler.iteration == 3
    assert sampler.cancelled
    np.testing.assert_array_equal(DT.sum(1), toy_matrix.doc_lengths())


def test_preset_cancel_event_keeps_initial_state(toy_matrix):
    event = threading.Event()
    event.set()
    sampler = _sampler(toy_matrix, seed=1, cancel_event=event)
    with pytest.warns(CancelledWarning):
        sampler.train(toy_matrix, max_iter=10, burnin=2)
    assert sampler.iteration == 0


@pytest.mark.parametrize('kwargs', [
    dict(n_topic=1),
    dict(n_topic=3, alpha=[0.1, 0.1]),
    dict(n_topic=3, beta=[0.1] * 5),
    dict(n_topic=3, alpha=-1.),
    dict(n_topic=3, n_workers=0),
    dict(n_topic=3, unknown=True),
])
def test_invalid_sampler_config(toy_matrix, kwargs):
    with pytest.raises(InvalidConfig):
        GibbsSampler(toy_matrix.n_doc, toy_matrix.n_voca, **kwargs)


@pytest.mark.parametrize('max_iter, burnin', [(0, -1), (5, 5), (2.5, -1), (5, None)])
def test_invalid_iterations(toy_matrix, max_iter, burnin):
    sampler = _sampler(toy_matrix)
    with pytest.raises(InvalidConfig):
        sampler.train(toy_matrix, max_iter=max_iter, burnin=burnin)


class SleepAt(SamplerCallback):
    def __init__(self, iteration, seconds):
        super(SleepAt, self).__init__(period=1)
        self.at = iteration
        self.seconds = seconds

    def __call__(self, sampler, iteration):
        if iteration == self.at:
            time.sleep(self.seconds)


def test_timeout_stops_at_sweep_boundary(toy_matrix):
    sampler = _sampler(toy_matrix, seed=1, timeout=0.5, callbacks=[SleepAt(2, 0.6)])
    with pytest.warns(CancelledWarning):
        DT, _, _, _ = sampler.train(toy_matrix, max_iter=50)
    assert sampler.iteration == 2
    assert sampler.cancelled
    np.testing.assert_array_equal(DT.sum(1), toy_matrix.doc_lengths())


def test_invalid_timeout(toy_matrix):
    with pytest.raises(InvalidConfig):
        _sampler(toy_matrix, timeout=0)
