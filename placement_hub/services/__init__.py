"""
Services module - orchestration across aggregates.
"""
