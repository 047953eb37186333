"""
Movie recommender core: genre-aware movie discovery over a single upstream API.
"""
