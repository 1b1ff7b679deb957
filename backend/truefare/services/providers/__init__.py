"""Offer provider clients — flights, hotels and cars.

Modules:
    base            Provider interface and ProviderError
    http_provider   JSON-over-HTTP client for the offers gateway
"""
