"""
Contracts (data models).

This folder defines the request/response shapes for the payment catalog
integration. Both mock and real clients return these contracts, so the
lifecycle coordinator never handles provider-specific payloads.
"""
