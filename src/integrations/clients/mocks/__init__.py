"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- No Stripe credentials are configured
- We want to test the product lifecycle end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as real clients.
- Mock clients should return data shaped according to src/integrations/contracts/*

Switching to real:
When STRIPE_SECRET_KEY is provided, src/api/main.py wires
clients/real_http/stripe_catalog.py instead.
"""
