"""Serverless entry point.

Mangum translates API Gateway / Netlify function events into ASGI requests,
including base64-encoded bodies, so the routes only ever see decoded bytes.
"""

from __future__ import annotations

from mangum import Mangum

from link_converter.main import app

handler = Mangum(app, lifespan="off")
