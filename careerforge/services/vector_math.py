"""
Vector Math
Helper numerici condivisi da scoring ed embeddings.
"""

import math
from typing import Sequence

import numpy as np


def round_score(value: float, digits: int = 2) -> float:
    """Arrotonda half-up (0.125 -> 0.13), non il banker's rounding di round()."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def l2_normalize(vector: np.ndarray) -> np.ndarray:
    """Divide per la norma euclidea; un vettore nullo resta nullo."""
    magnitude = np.linalg.norm(vector)
    if magnitude > 0:
        return vector / magnitude
    return vector


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Similarità coseno tra due vettori.

    Ritorna 0 se le lunghezze differiscono o se una delle norme è 0:
    in quel caso 0 significa "similarità non definita", non "ortogonali".
    """
    if len(a) != len(b):
        return 0.0

    vec_a = np.asarray(a, dtype=float)
    vec_b = np.asarray(b, dtype=float)

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(vec_a, vec_b) / (norm_a * norm_b))
