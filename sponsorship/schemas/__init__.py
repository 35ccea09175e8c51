# sponsorship/schemas/__init__.py
"""
Pydantic request and response models for the HTTP surface.
"""
