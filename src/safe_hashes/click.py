"""Custom Click Command and Group that report library errors."""

from typing import Any, cast

import click

from .console import print_unsupported
from .exceptions import InvalidInput, NoTransactionFound, UnsupportedVersion


class Command(click.Command):
    """Translate library exceptions into CLI outcomes.

    An unsupported Safe version or a missing transaction means there is
    nothing to verify, which is not a failure.
    """

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except (UnsupportedVersion, NoTransactionFound) as exc:
            print_unsupported(str(exc))
            ctx.exit(0)
        except InvalidInput as exc:
            raise click.ClickException(str(exc)) from exc


class Group(click.Group):
    def command(self, *args: Any, **kwargs: Any) -> click.Command:
        kwargs.setdefault("cls", Command)
        return cast(click.Command, super().command(*args, **kwargs))
