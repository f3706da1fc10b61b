"""HTTP application around the generated router."""

from restrouter.api.main import create_app

__all__ = ["create_app"]
