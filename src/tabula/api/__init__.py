"""HTTP routes for table models."""

from tabula.api.routers.crud import CrudRouter, request_params

__all__ = ["CrudRouter", "request_params"]
