"""
Live innings scoring API
"""
