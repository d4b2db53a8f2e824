"""Tenancy bounded context.

Owns the tenant registry, store schema lifecycle, per-request tenant
resolution, connection routing and store provisioning.
"""
