from .corpus import CountMatrix
from .errors import (CancelledWarning, DiagnosticsWarning, EmptyIntersection, InvalidConfig, InvalidInput,
                     LdaError, ModelStateError)
from .lda_gibbs import GibbsLDA, ModelState, fit_lda_model
from .model import LdaModel
from .predict import PredictMethod, predict
from .sampler import GibbsSampler, FoldInSampler
