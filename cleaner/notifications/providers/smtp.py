"""Email delivery over SMTP.

The mailer is configured entirely from the referenced secret:

* ``SMTP_RECIPIENTS`` - comma separated ``To`` addresses (required)
* ``SMTP_SENDER`` - ``From`` address, also the login user (required)
* ``SMTP_HOST`` - server host (required)
* ``SMTP_PORT`` - server port, defaults to 587
* ``SMTP_BCC`` - comma separated blind copies
* ``SMTP_IDENTITY`` - optional PLAIN authorization identity
* ``SMTP_PASSWORD`` - password; no login is attempted without it

``smtplib`` is blocking, so delivery runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Callable, Mapping

from cleaner.common.logging import bind_logger

from ..credentials import CredentialResolver, require
from ..errors import InsecureAuthenticationError, InvalidSecretValueError
from ..schemas import Cleaner, Notification, ReportSpec
from .base import LoggerLike, report_text

SMTP_RECIPIENTS = "SMTP_RECIPIENTS"
SMTP_BCC = "SMTP_BCC"
SMTP_IDENTITY = "SMTP_IDENTITY"
SMTP_SENDER = "SMTP_SENDER"
SMTP_PASSWORD = "SMTP_PASSWORD"
SMTP_HOST = "SMTP_HOST"
SMTP_PORT = "SMTP_PORT"

DEFAULT_SMTP_PORT = 587
_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


def _split_addresses(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(address.strip() for address in raw.split(",") if address.strip())


@dataclass(frozen=True, slots=True)
class SMTPInfo:
    recipients: tuple[str, ...]
    sender: str
    host: str
    port: int = DEFAULT_SMTP_PORT
    bcc: tuple[str, ...] = ()
    identity: str | None = None
    password: str | None = None

    @classmethod
    def from_data(cls, data: Mapping[str, str]) -> "SMTPInfo":
        recipients = _split_addresses(require(data, SMTP_RECIPIENTS))
        if not recipients:
            raise InvalidSecretValueError(SMTP_RECIPIENTS, data[SMTP_RECIPIENTS])
        raw_port = data.get(SMTP_PORT)
        port = DEFAULT_SMTP_PORT
        if raw_port:
            try:
                port = int(raw_port)
            except ValueError:
                raise InvalidSecretValueError(SMTP_PORT, raw_port) from None
        return cls(
            recipients=recipients,
            sender=require(data, SMTP_SENDER),
            host=require(data, SMTP_HOST),
            port=port,
            bcc=_split_addresses(data.get(SMTP_BCC)),
            identity=data.get(SMTP_IDENTITY) or None,
            password=data.get(SMTP_PASSWORD) or None,
        )


class Mailer:
    """Sends plain or HTML mail with the settings of one secret."""

    def __init__(
        self,
        info: SMTPInfo,
        *,
        timeout: float = 30.0,
        smtp_factory: Callable[..., smtplib.SMTP] | None = None,
    ) -> None:
        self.info = info
        self._timeout = timeout
        self._smtp_factory = smtp_factory or smtplib.SMTP

    @classmethod
    async def from_secret(
        cls,
        resolver: CredentialResolver,
        notification: Notification,
        *,
        timeout: float = 30.0,
    ) -> "Mailer":
        data = await resolver.get_data(notification)
        return cls(SMTPInfo.from_data(data), timeout=timeout)

    def build_message(self, subject: str, body: str, is_html: bool = False) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.info.sender
        message["To"] = ", ".join(self.info.recipients)
        message["Subject"] = subject
        message.set_content(body, subtype="html" if is_html else "plain")
        return message

    async def send_mail(self, subject: str, body: str, is_html: bool = False) -> None:
        message = self.build_message(subject, body, is_html)
        await asyncio.to_thread(self._deliver, message)

    def _deliver(self, message: EmailMessage) -> None:
        info = self.info
        with self._smtp_factory(info.host, info.port, timeout=self._timeout) as smtp_conn:
            smtp_conn.ehlo()
            encrypted = False
            if smtp_conn.has_extn("starttls"):
                smtp_conn.starttls(context=ssl.create_default_context())
                smtp_conn.ehlo()
                encrypted = True
            if info.password:
                # Plain credentials only travel over TLS or to the local host.
                if not encrypted and info.host not in _LOCAL_HOSTS:
                    raise InsecureAuthenticationError(info.host)
                self._authenticate(smtp_conn)
            smtp_conn.send_message(
                message,
                from_addr=info.sender,
                to_addrs=[*info.recipients, *info.bcc],
            )

    def _authenticate(self, smtp_conn: smtplib.SMTP) -> None:
        info = self.info
        if not info.identity:
            smtp_conn.login(info.sender, info.password or "")
            return
        credentials = f"{info.identity}\0{info.sender}\0{info.password}"
        smtp_conn.auth("PLAIN", lambda challenge=None: credentials, initial_response_ok=True)


class SMTPProvider:
    def __init__(
        self,
        resolver: CredentialResolver,
        *,
        timeout: float = 30.0,
    ) -> None:
        self._resolver = resolver
        self._timeout = timeout

    async def send(
        self,
        *,
        cleaner: Cleaner,
        report: ReportSpec,
        message: str,
        notification: Notification,
        logger: LoggerLike,
    ) -> None:
        mailer = await Mailer.from_secret(self._resolver, notification, timeout=self._timeout)
        log = bind_logger(logger, host=mailer.info.host)
        log.info("send smtp message")
        await mailer.send_mail(message, report_text(report), False)
