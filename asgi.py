"""
asgi.py -- Application assembly for the contact list API.

The one place that reads process configuration and turns it into an app.
api/main.py only ever receives Settings from its caller.

Run with:  uvicorn asgi:app --reload
           python main.py serve
"""

from api.main import create_app
from core.config import get_settings

app = create_app(get_settings())
