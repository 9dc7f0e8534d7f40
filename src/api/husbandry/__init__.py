"""Husbandry bounded context.

Tracks coops, flocks, egg production and purchases for a tenant.
"""
