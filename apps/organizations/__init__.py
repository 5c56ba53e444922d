"""
Organizations App - Hospitals and blood centers

Organizations collect donations, hold per-blood-type credit inventory and
are activated by an administrator after review.
"""
