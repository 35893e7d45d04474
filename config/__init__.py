"""
Configuration package: settings and logging setup.
"""
