import numpy as np
from scipy import sparse

from .errors import InvalidInput


class CountMatrix():
    """ Sparse document-term count matrix with named rows and columns

    Attributes
    ----------
    counts: scipy.sparse.csr_matrix, shape (n_doc, n_voca)
        nonnegative integer counts, rows = documents, columns = terms
    doc_ids: ndarray, shape (n_doc)
        name of each row
    vocabulary: ndarray, shape (n_voca)
        term of each column, unique
    """

    def __init__(self, counts, doc_ids=None, vocabulary=None):
        if sparse.issparse(counts):
            mat = sparse.csr_matrix(counts)
        else:
            mat = np.asarray(counts)
            if mat.ndim != 2:
                raise InvalidInput('count matrix must be two dimensional, got shape %s' % (mat.shape,))
            mat = sparse.csr_matrix(mat)

        if mat.nnz:
            data = mat.data
            if data.dtype.kind not in 'biuf':
                raise InvalidInput('count matrix must be numeric')
            if np.any(data < 0):
                raise InvalidInput('count matrix contains negative values')
            if data.dtype.kind == 'f' and (not np.all(np.isfinite(data)) or np.any(data != np.floor(data))):
                raise InvalidInput('count matrix contains non-integer values')
        mat = mat.astype(np.int64)
        mat.eliminate_zeros()
        mat.sort_indices()
        self.counts = mat

        n_doc, n_voca = mat.shape
        if doc_ids is None:
            doc_ids = [str(di) for di in range(n_doc)]
        if vocabulary is None:
            vocabulary = [str(wi) for wi in range(n_voca)]
        self.doc_ids = np.asarray(doc_ids).astype(str)
        self.vocabulary = np.asarray(vocabulary).astype(str)
        if len(self.doc_ids) != n_doc:
            raise InvalidInput('got %d document ids for %d rows' % (len(self.doc_ids), n_doc))
        if len(self.vocabulary) != n_voca:
            raise InvalidInput('got %d terms for %d columns' % (len(self.vocabulary), n_voca))
        if len(set(self.vocabulary.tolist())) != n_voca:
            raise InvalidInput('vocabulary terms must be unique')

    @classmethod
    def from_ids_cnt(cls, doc_ids, doc_cnt, n_voca=None, **kwargs):
        """ Build a matrix from per-document word id and word count lists

        Parameters
        ----------
        doc_ids: list
            list of word id arrays, one per document
        doc_cnt: list
            list of word count arrays aligned with `doc_ids`
        n_voca: int
            number of columns; defaults to the largest word id + 1
        """
        if len(doc_ids) != len(doc_cnt):
            raise InvalidInput('doc_ids and doc_cnt must have the same length')
        rows, cols, vals = list(), list(), list()
        for di in range(len(doc_ids)):
            ids = np.asarray(doc_ids[di], dtype=np.int64)
            cnt = np.asarray(doc_cnt[di])
            if len(ids) != len(cnt):
                raise InvalidInput('document %d has %d ids but %d counts' % (di, len(ids), len(cnt)))
            rows.extend([di] * len(ids))
            cols.extend(ids.tolist())
            vals.extend(cnt.tolist())
        if n_voca is None:
            n_voca = max(cols) + 1 if cols else 0
        mat = sparse.coo_matrix((vals, (rows, cols)), shape=(len(doc_ids), n_voca))
        return cls(mat.tocsr(), **kwargs)

    @property
    def n_doc(self):
        return self.counts.shape[0]

    @property
    def n_voca(self):
        return self.counts.shape[1]

    @property
    def shape(self):
        return self.counts.shape

    def doc_lengths(self):
        return np.asarray(self.counts.sum(1)).ravel()

    def term_totals(self):
        return np.asarray(self.counts.sum(0)).ravel()

    def row(self, di):
        """ return (word ids, word counts) of the nonzero entries of document `di`
        """
        start, end = self.counts.indptr[di], self.counts.indptr[di + 1]
        return self.counts.indices[start:end], self.counts.data[start:end]

    def iter_rows(self):
        for di in range(self.n_doc):
            yield self.row(di)

    def token_lists(self):
        """ expand counts to one word id per token occurrence, document by document
        """
        corpus = list()
        for ids, cnt in self.iter_rows():
            corpus.append(np.repeat(ids, cnt))
        return corpus

    def check_nonempty(self):
        """ Raise InvalidInput unless every row and every column has a nonzero count
        """
        if self.n_doc == 0 or self.n_voca == 0:
            raise InvalidInput('count matrix is empty, shape %s' % (self.shape,))
        empty_docs = np.flatnonzero(self.doc_lengths() == 0)
        if len(empty_docs):
            raise InvalidInput('documents with no tokens: %s' % ', '.join(self.doc_ids[empty_docs[:10]].astype(str)))
        empty_terms = np.flatnonzero(self.term_totals() == 0)
        if len(empty_terms):
            raise InvalidInput('terms that never occur: %s' % ', '.join(self.vocabulary[empty_terms[:10]].astype(str)))

    def restrict(self, vocabulary):
        """ Align the columns to another vocabulary by term name

        Terms of `vocabulary` missing here become all-zero columns and terms
        not in `vocabulary` are dropped.

        Returns
        -------
        restricted: CountMatrix
            matrix with columns in the order of `vocabulary`
        shared: ndarray of bool, shape (len(vocabulary))
            True where the term is present in this matrix
        """
        vocabulary = np.asarray(vocabulary).astype(str)
        position = dict((term, wi) for wi, term in enumerate(self.vocabulary.tolist()))
        source = np.array([position.get(term, -1) for term in vocabulary.tolist()], dtype=np.int64)
        shared = source >= 0

        selector = sparse.csr_matrix((np.ones(shared.sum(), dtype=np.int64),
                                      (source[shared], np.flatnonzero(shared))),
                                     shape=(self.n_voca, len(vocabulary)))
        restricted = CountMatrix(self.counts.dot(selector), doc_ids=self.doc_ids, vocabulary=vocabulary)
        return restricted, shared

    def binarize(self):
        """ return a 0/1 csr matrix marking which terms occur in which documents
        """
        mat = self.counts.copy()
        mat.data = np.ones_like(mat.data)
        return mat

    def row_normalized(self):
        """ return a float csr matrix whose nonempty rows are term-frequency distributions
        """
        lengths = self.doc_lengths().astype(float)
        inv = np.divide(1., lengths, out=np.zeros_like(lengths), where=lengths > 0)
        return sparse.diags(inv).dot(self.counts.astype(float)).tocsr()

    def __repr__(self):
        return 'CountMatrix(n_doc=%d, n_voca=%d, nnz=%d)' % (self.n_doc, self.n_voca, self.counts.nnz)
