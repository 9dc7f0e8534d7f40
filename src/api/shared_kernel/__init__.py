"""Shared Kernel module.

Foundational components that the husbandry and IAM bounded contexts both
depend on: the Result/Error envelope returned by every use case, tenant
identity and the per-request tenant context accessor, field validation
guards, and the observation context used by domain probes.

Changes to this module affect multiple contexts and should be carefully
coordinated.
"""
