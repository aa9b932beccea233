"""Siigo ERP integration: API client, catalogs, accounts payable and journals."""

from backoffice.services.siigo.client import (
    SiigoAPIError,
    SiigoAuthCredentials,
    SiigoAuthError,
    SiigoClient,
    SiigoCredentialsError,
    SiigoError,
    SiigoNetworkError,
    siigo_client,
)

__all__ = [
    "SiigoAPIError",
    "SiigoAuthCredentials",
    "SiigoAuthError",
    "SiigoClient",
    "SiigoCredentialsError",
    "SiigoError",
    "SiigoNetworkError",
    "siigo_client",
]
