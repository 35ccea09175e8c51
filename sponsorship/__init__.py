# sponsorship/__init__.py
"""
Sponsorship management API: sponsors, creators, campaigns and their
deliverables, proofs and credits.
"""

__version__ = "1.0.0"
