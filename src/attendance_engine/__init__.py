"""Flag-day attendance engine.

This package is organized by feature modules (schedules, requirements, roster,
attendance, targeting, classification, history, reports, ...) with a thin Flask
controller layer and service/repository layers underneath.
"""
