"""Routing — pattern compilation, path normalization, and the route table.

Routes are registered during setup and looked up per request without
any shared mutable state.
"""
