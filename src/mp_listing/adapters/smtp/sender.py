"""SMTP adapter – SmtpEmailSender (aiosmtplib)."""
from __future__ import annotations

import email.message
import email.utils
from dataclasses import dataclass
from typing import Any

import aiosmtplib

from mp_listing.application.email.message import EmailMessage

__all__ = ["SmtpConfig", "SmtpEmailSender"]


@dataclass
class SmtpConfig:
    hostname: str
    port: int = 587
    username: str | None = None
    password: str | None = None
    use_tls: bool = False
    start_tls: bool = True
    timeout: float = 30.0


class SmtpEmailSender:
    """EmailSender that opens one SMTP session per message.

    Each :meth:`send` is a single attempt bounded by ``config.timeout``.
    """

    def __init__(self, config: SmtpConfig) -> None:
        self._config = config

    def build_mime(self, message: EmailMessage) -> email.message.EmailMessage:
        msg = email.message.EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = message.from_address
        msg["To"] = ", ".join(message.to)
        msg["Message-ID"] = email.utils.make_msgid(domain=message.from_address.rpartition("@")[2] or None)
        if message.reply_to:
            msg["Reply-To"] = message.reply_to
        for name, value in message.headers.items():
            msg[name] = value
        msg.set_content(message.body)
        return msg

    async def send(self, message: EmailMessage) -> str:
        mime = self.build_mime(message)
        kwargs: dict[str, Any] = {
            "hostname": self._config.hostname,
            "port": self._config.port,
            "use_tls": self._config.use_tls,
            "start_tls": self._config.start_tls,
            "timeout": self._config.timeout,
        }
        if self._config.username and self._config.password:
            kwargs["username"] = self._config.username
            kwargs["password"] = self._config.password
        await aiosmtplib.send(mime, **kwargs)
        return str(mime["Message-ID"])
