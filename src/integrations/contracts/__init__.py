"""
Contracts (data models).

This folder defines the shapes returned by the wizard's simulated
integrations (document scanning, VIN lookup).

Both the mock clients and any future real client should use these contracts.
"""
