"""Husbandry domain layer.

Pure domain model for coops, flocks, their composition history, daily egg
records and supply purchases. No infrastructure dependencies.
"""
