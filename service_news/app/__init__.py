"""
News service: articles with likes and comments.
"""
