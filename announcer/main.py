from announcer.api.main import app

__all__ = ["app"]
