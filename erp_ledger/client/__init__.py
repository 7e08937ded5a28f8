"""Python client for the ERP ledger API."""

from erp_ledger.client.cache import QueryCache
from erp_ledger.client.api_client import ApiError, ErpClient, FormValidationError

__all__ = ["QueryCache", "ErpClient", "ApiError", "FormValidationError"]
