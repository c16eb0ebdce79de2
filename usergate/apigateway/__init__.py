from .app import create_app, build_app

__all__ = ["create_app", "build_app"]
