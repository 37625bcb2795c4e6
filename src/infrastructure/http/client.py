from __future__ import annotations

import ssl

import aiohttp
import certifi

from shared.constants import HTTP_TIMEOUT_DEFAULT, HTTP_USER_AGENT


def make_ssl_context() -> ssl.SSLContext:
    return ssl.create_default_context(cafile=certifi.where())


def make_http_session(
    *,
    user_agent: str = HTTP_USER_AGENT,
    timeout: float = HTTP_TIMEOUT_DEFAULT,
) -> aiohttp.ClientSession:
    """
    Создаёт HTTP-сессию для загрузки тайлов.

    Соединения без лимита на хост: все тайлы сессии рендеринга запрашиваются
    одновременно, распределение по хостам обеспечивают поддомены сервера.
    Ответы не кэшируются.
    """
    connector = aiohttp.TCPConnector(ssl=make_ssl_context(), limit=0, limit_per_host=0)
    return aiohttp.ClientSession(
        connector=connector,
        headers={'User-Agent': user_agent},
        timeout=aiohttp.ClientTimeout(total=timeout),
    )
