"""
Domain models shared with downstream consumers.
"""

from course_rag.models.citation import Citation

__all__ = ["Citation"]
