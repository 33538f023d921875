from __future__ import annotations

import logging

from ..context import ProxyCredentials, RunContext
from ..lib.prompt import ConsolePrompter, Prompter, ask_yes_no
from ..pipeline import FailurePolicy

logger = logging.getLogger(__name__)

PROXY_VARS = (
    "http_proxy",
    "https_proxy",
    "ftp_proxy",
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "FTP_PROXY",
)


def clear_proxy(ctx: RunContext) -> None:
    for name in PROXY_VARS:
        ctx.env.pop(name, None)


def apply_proxy(ctx: RunContext, creds: ProxyCredentials) -> None:
    clear_proxy(ctx)
    for name in PROXY_VARS:
        ctx.export(name, creds.url)
    ctx.proxy = creds


class ConfigureProxyStep:
    step_id = "10_configure_proxy"
    policy = FailurePolicy.ABORT

    def __init__(self, prompter: Prompter | None = None) -> None:
        self.prompter = prompter or ConsolePrompter()

    def run(self, ctx: RunContext) -> None:
        logger.info("Enter proxy details if you are connected to internet through proxy")
        if not ask_yes_no(self.prompter, "Is your internet connection behind proxy? (y/n): "):
            # Inherited proxy variables would otherwise leak into apt and pip.
            clear_proxy(ctx)
            ctx.proxy = None
            logger.info("Install without proxy")
            return

        # Fields are taken verbatim; a malformed proxy surfaces later in apt/pip.
        hostname = self.prompter.ask("Proxy Hostname :").strip()
        port = self.prompter.ask("Proxy Port :").strip()
        username = self.prompter.ask(f"username@{hostname}:{port} :").strip()
        password = self.prompter.ask_secret("Password :")

        apply_proxy(
            ctx,
            ProxyCredentials(hostname=hostname, port=port, username=username, password=password),
        )
        logger.info("Install with proxy (%s:%s)", hostname, port)
