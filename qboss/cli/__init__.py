"""
Command-line interface for QBoss.
"""
