"""
Common CLI utilities and decorators for consistent command behavior.
"""

import logging
from functools import wraps

import click

from .exit_codes import CommandError, INTERRUPTED, get_exit_code_for_exception
from .infra.github_client import GitHubClient
from .output import emit_error

logger = logging.getLogger(__name__)


def github_options(func):
    """
    Add the repository and token options shared by remote commands.

    Values come from the command line, then the GitHub Actions environment,
    then the config file.
    """
    func = click.option(
        "--token",
        envvar=["INPUT_GITHUB-TOKEN", "INPUT_GITHUB_TOKEN", "GITHUB_TOKEN"],
        help="GitHub access token",
    )(func)
    func = click.option(
        "--repo", "repository",
        envvar="GITHUB_REPOSITORY",
        help="Repository as owner/name (defaults to GITHUB_REPOSITORY)",
    )(func)
    return func


def handle_errors(func):
    """
    Decorator that turns engine errors into a message on stderr and the
    error's exit code. Expects the command to take a ``pretty`` flag.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        pretty = kwargs.get('pretty', False)
        try:
            return func(*args, **kwargs)
        except (click.ClickException, click.exceptions.Exit, click.Abort):
            # Click handles its own exit codes
            raise
        except CommandError as e:
            emit_error(str(e), type=type(e).__name__, pretty=pretty)
            click.get_current_context().exit(e.exit_code)
        except KeyboardInterrupt:
            emit_error("Interrupted", type="interrupted", pretty=pretty)
            click.get_current_context().exit(INTERRUPTED)
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            emit_error(f"Command failed: {e}", type=type(e).__name__, pretty=pretty)
            click.get_current_context().exit(get_exit_code_for_exception(e))

    return wrapper


def make_client(ctx: click.Context, repository: str, token: str) -> GitHubClient:
    """Build the GitHub client for a command from options and config."""
    github = ctx.obj['config'].get('github', {})
    if not token:
        logger.warning("No GitHub token given, API calls are unauthenticated")

    return GitHubClient.for_repository(
        repository,
        token=token or None,
        api_url=github.get('api_url') or 'https://api.github.com',
        timeout=github.get('timeout_seconds', 30),
    )
