import numpy as np


def get_top_words(topic_word_matrix, vocab, topic, n_words=20):
    if not isinstance(vocab, np.ndarray):
        vocab = np.array(vocab)
    top_words = vocab[topic_word_matrix[topic].argsort()[::-1][:n_words]]
    return top_words


def write_top_words(topic_word_matrix, vocab, filepath, n_words=20, delimiter=',', newline='\n'):
    """ write one line per topic: the topic index followed by its top words
    """
    with open(filepath, 'w') as f:
        for ti in range(topic_word_matrix.shape[0]):
            top_words = get_top_words(topic_word_matrix, vocab, ti, n_words)
            f.write('%d' % (ti))
            for word in top_words:
                f.write(delimiter + str(word))
            f.write(newline)


def topic_prevalence(theta, doc_lengths=None):
    """ Percentage of corpus tokens expected under each topic

    Parameters
    ----------
    theta: ndarray, shape (n_doc, n_topic)
    doc_lengths: ndarray, shape (n_doc)
        token count of each document; every document weighs the same when None

    Returns
    -------
    prevalence: ndarray, shape (n_topic), sums to 100
    """
    if doc_lengths is None:
        doc_lengths = np.ones(theta.shape[0])
    weight = (theta * np.asarray(doc_lengths, dtype=float)[:, np.newaxis]).sum(0)
    return 100. * weight / weight.sum()


def topic_given_term(phi, theta, doc_lengths=None):
    """ P(topic | term) by Bayes' rule, using the token-weighted topic prevalence as P(topic)

    Returns
    -------
    gamma: ndarray, shape (n_topic, n_voca), every column sums to 1
    """
    p_topic = topic_prevalence(theta, doc_lengths) / 100.
    joint = phi * p_topic[:, np.newaxis]
    return joint / joint.sum(0)[np.newaxis, :]
