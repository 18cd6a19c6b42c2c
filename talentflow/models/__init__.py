"""
Models package.

Import all models here so they are registered with SQLAlchemy.
"""

from talentflow.models.job import Job
from talentflow.models.candidate import Candidate

__all__ = [
    "Job",
    "Candidate",
]
