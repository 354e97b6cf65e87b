"""
Operational scripts
Run from the repository root: python -m scripts.check_system
"""
