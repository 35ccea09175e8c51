# sponsorship/services/__init__.py
"""
Domain services. Routes call these; these call the repository.
"""
