"""Application keys for type-safe app configuration access."""

from aiohttp import web

from menutrail.services import TrailServices

services_key = web.AppKey("services", TrailServices)
