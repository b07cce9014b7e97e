"""Domain layer — rental accrual, day-offs, lifecycle, and payment rules.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
