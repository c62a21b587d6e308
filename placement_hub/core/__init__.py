"""
Core module - settings, actor identity and the error taxonomy.
"""
