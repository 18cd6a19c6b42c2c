"""
Candidate pipeline engine.

Stages, access scoping, loading, filtering, transitions and the
interaction-scoped sessions that tie them together.
"""
