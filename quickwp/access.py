"""
Control de acceso a las herramientas de QuickWP (Basic Auth o token en la URL)
"""

import logging
import secrets
from typing import Optional

from fastapi import HTTPException

from .config import SiteConfig

logger = logging.getLogger(__name__)

REALM = 'WP Quick Tools'


def _matches(given: Optional[str], expected: str) -> bool:
    if given is None:
        return False
    return secrets.compare_digest(given.encode('utf-8'), expected.encode('utf-8'))


class AccessControl:
    """Modo none (sin protección), basic o token según la configuración"""

    def __init__(self, config: SiteConfig):
        self.config = config

    def is_granted(
        self,
        basic_user: Optional[str] = None,
        basic_password: Optional[str] = None,
        token: Optional[str] = None,
    ) -> bool:
        mode = self.config.access_mode

        if mode == 'basic':
            expected_user = self.config.get(SiteConfig.KEY_ACCESS_BASIC_USER, '')
            expected_pass = self.config.get(SiteConfig.KEY_ACCESS_BASIC_PASSWORD, '')
            return _matches(basic_user, expected_user) and _matches(basic_password, expected_pass)

        if mode == 'token':
            expected_token = self.config.get(SiteConfig.KEY_ACCESS_TOKEN, '')
            return bool(token) and _matches(token, expected_token)

        return True

    def enforce(
        self,
        basic_user: Optional[str] = None,
        basic_password: Optional[str] = None,
        token: Optional[str] = None,
    ) -> None:
        """Lanza HTTPException (401 o 403) si el acceso no está permitido"""
        if self.is_granted(basic_user, basic_password, token):
            return

        mode = self.config.access_mode
        logger.warning(f"⚠️ Acceso denegado (modo {mode})")
        if mode == 'basic':
            raise HTTPException(
                status_code=401,
                detail='Authentication required.',
                headers={'WWW-Authenticate': f'Basic realm="{REALM}"'},
            )
        raise HTTPException(status_code=403, detail='Access denied.')
