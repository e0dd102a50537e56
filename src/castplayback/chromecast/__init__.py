"""Chromecast backend for castplayback."""

from __future__ import annotations

import castplayback.chromecast.client as _client

ChromecastClient = _client.ChromecastClient

__all__ = ["ChromecastClient"]
