"""
Command line interface for ctxcheck.
"""
