# Regimes package for VeriBound
"""
Domain computations that turn raw business inputs into result payloads.

Each regime validates its own inputs and raises ValidationError before
anything is sealed.
"""
