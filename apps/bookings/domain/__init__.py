"""
Booking Domain

Pure business rules of the booking lifecycle. Nothing in this package
touches the database or the web framework:
- pricing: tiered rental amount and platform fee
- availability: the date overlap rule
- state_machine: statuses, transitions and who may trigger them
- rating: when and how a booking can be rated
"""
