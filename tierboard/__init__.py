"""
Shared tier list boards: users rank a board's characters into S-D tiers,
each viewer seeing their own ranking overlay on the shared roster.
"""
