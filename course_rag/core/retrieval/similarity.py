"""
Vector helpers shared by the index stores and the search engine.

Dependencies: numpy
System role: Vector literal format and cosine similarity
"""

from collections.abc import Sequence

import numpy as np


def to_vector_literal(vector: Sequence[float]) -> str:
    """
    Render a vector in the pgvector text format.

    Example:
        to_vector_literal([0.12, -0.04]) == "[0.12,-0.04]"
    """
    return "[" + ",".join(repr(float(v)) for v in vector) + "]"


def parse_vector_literal(literal: str) -> list[float]:
    """Parse the pgvector text format back into floats."""
    body = literal.strip()
    if not (body.startswith("[") and body.endswith("]")):
        raise ValueError(f"Not a vector literal: {literal[:40]!r}")
    body = body[1:-1].strip()
    if not body:
        return []
    return [float(part) for part in body.split(",")]


def coerce_vector(value) -> list[float]:
    """Accept a list, numpy array or pgvector literal and return floats."""
    if isinstance(value, str):
        return parse_vector_literal(value)
    if isinstance(value, np.ndarray):
        return value.astype(float).tolist()
    return [float(v) for v in value]


def clamp_similarity(value: float) -> float:
    if value != value:  # NaN
        return 0.0
    return min(1.0, max(0.0, float(value)))


def cosine_similarity(query: Sequence[float], matrix: np.ndarray) -> np.ndarray:
    """
    Cosine similarity of ``query`` against each row of ``matrix``.

    Rows or queries with zero norm score 0.
    """
    q = np.asarray(query, dtype=np.float64)
    m = np.asarray(matrix, dtype=np.float64)
    if m.size == 0:
        return np.zeros(0)
    q_norm = np.linalg.norm(q)
    row_norms = np.linalg.norm(m, axis=1)
    denom = row_norms * q_norm
    dots = m @ q
    with np.errstate(divide="ignore", invalid="ignore"):
        sims = np.where(denom > 0, dots / np.where(denom > 0, denom, 1.0), 0.0)
    return sims
