"""
CLI command handlers.
"""
