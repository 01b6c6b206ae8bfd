"""Booking lifecycle and availability engine."""
