from infrastructure.http.api_client import ApiClient

__all__ = ["ApiClient"]
