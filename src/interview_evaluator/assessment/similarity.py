"""Text similarity strategies for relevance scoring."""

from collections.abc import Callable

from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

SimilarityStrategy = Callable[[str, str], float]


def pairwise_similarity(text: str, reference: str) -> float:
    """TF-IDF cosine similarity with the two texts as the whole corpus.

    IDF is fitted on exactly these two documents, so a term either appears in
    both (idf 1.0) or in one (idf ~1.41). A corpus-wide model over the whole
    question bank would weight terms differently; swap the strategy to get that.

    Args:
        text: Candidate answer.
        reference: Expected answer.

    Returns:
        Similarity in [0, 1]; 0 when either text has no extractable terms.
    """
    vectorizer = TfidfVectorizer(stop_words="english")
    try:
        matrix = vectorizer.fit_transform([text, reference])
    except ValueError:
        # Empty vocabulary: neither text has a usable term
        return 0.0
    if matrix[0].nnz == 0 or matrix[1].nnz == 0:
        return 0.0
    similarity = float(cosine_similarity(matrix[0:1], matrix[1:2])[0][0])
    return max(0.0, min(1.0, similarity))
