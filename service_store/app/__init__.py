"""
Store service: marketplace items and their reviews.

List and detail reads go through the shared cache accessor; every mutation
invalidates the ``store:`` key family.
"""
