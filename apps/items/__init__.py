"""Items app package.

Minimal item catalog: owner, rate tiers and rental duration limits, plus
the lookup the booking engine uses to price and authorize reservations.
"""
