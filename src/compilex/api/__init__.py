"""
Expose the FastAPI application instance.

Importing this module will create a FastAPI application and register
all routes.  The service can be served with any ASGI server, or started
directly with the bundled Uvicorn entry point:

```sh
python -m compilex.api
```
"""

from .main import app, run

__all__ = ["app", "run"]
