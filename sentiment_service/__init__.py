"""
Sentence-level sentiment analysis service.
"""
