"""
Descriptive analysis, charts and the batch runner for the stardate corpus.
"""
