"""
Post lifecycle, engagement engine and read queries.

Kept free of imports so ``piazza.db`` can depend on ``posts.lifecycle``.
"""
