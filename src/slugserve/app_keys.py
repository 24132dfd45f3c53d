"""Application keys for type-safe app configuration access."""

from aiohttp import web

from slugserve.config import OAuthConfig
from slugserve.core.store import FileStore

store_key = web.AppKey("store", FileStore)
oauth_key = web.AppKey("oauth", OAuthConfig)
request_timeout_key = web.AppKey("request_timeout", float)
