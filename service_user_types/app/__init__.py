"""
User-type resolution: plan tiers and roles with caching and retry.
"""
