"""
Infrastructure слой домена Parsing.
"""
