"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``.  Owns the lazily created rates client and the
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click

from pricectl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from pricectl.config.settings import PriceSettings
    from pricectl.domain.errors import PricectlError
    from pricectl.infrastructure.client import RatesClient
    from pricectl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The HTTP client is only built when a command needs it, so ``--help``
    and ``--version`` never touch the network stack.
    """

    def __init__(self, settings: PriceSettings) -> None:
        self.settings = settings
        self._client: RatesClient | None = None

        from pricectl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from pricectl.services.telemetry import enable_telemetry

            enable_telemetry()

    def client(self, op: str, app_id: str | None = None) -> RatesClient:
        """The rates client; a missing app id is emitted as a failed *op*."""
        if self._client is None:
            from pricectl.domain.errors import PricectlError
            from pricectl.infrastructure.client import RatesClient

            try:
                self._client = RatesClient.from_settings(self.settings, app_id=app_id)
            except PricectlError as exc:
                self.fail(op, exc)
            click.get_current_context().call_on_close(self.close)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout, returns normally.  Warnings go to
          stderr so they never end up in a piped ledger file.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def fail(self, op: str, exc: PricectlError) -> NoReturn:
        """Emit *exc* as a failed *op* and exit with code 1."""
        from pricectl.services.result import ServiceError, ServiceResult

        error = ServiceError(code=exc.code, message=exc.message, detail=exc.detail)
        self.emit(ServiceResult(ok=False, op=op, error=error))
        raise SystemExit(1)
