#!/usr/bin/env python3

import click

from nexttag import __version__
from nexttag.config import configure_logging, load_config
from nexttag.exit_codes import ConfigError
from nexttag.output import emit_error
from nexttag.commands.resolve import resolve_cmd
from nexttag.commands.tags import tags_cmd
from nexttag.commands.config import config_cmd


def default_map_from_config(config):
    """Turn the loaded config into click defaults for each command."""
    github = config.get('github', {})
    release = config.get('release', {})

    remote = {
        'repository': github.get('repository') or None,
        'token': github.get('token') or None,
    }
    return {
        'resolve': dict(
            remote,
            bump=release.get('bump', 'patch'),
            release_branches=release.get('release_branches'),
            with_v=release.get('with_v', True),
            issue_labels=release.get('issue_labels'),
            prerelease_label=release.get('prerelease_label') or None,
            dry_run=release.get('dry_run', False),
        ),
        'tags': dict(
            remote,
            release_branches=release.get('release_branches'),
        ),
    }


@click.group()
@click.version_option(version=__version__, prog_name="nexttag")
@click.option("--config", "config_path", type=click.Path(dir_okay=False),
              envvar="NEXTTAG_CONFIG", help="Configuration file (JSON, TOML or YAML)")
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to stderr")
@click.pass_context
def cli(ctx, config_path, verbose):
    """nexttag - Compute the next release tag of a GitHub repository.

    Combines existing version tags, the branch being built and markers in
    commit messages into a deterministic next version, and publishes it
    as a tag.
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        emit_error(str(e), type="ConfigError")
        ctx.exit(e.exit_code)

    log_config = config.get('logging', {})
    configure_logging(
        "DEBUG" if verbose else log_config.get('level', 'INFO'),
        log_config.get('format', "%(levelname)s: %(message)s"),
    )

    ctx.obj = {'config': config, 'config_path': config_path}
    ctx.default_map = default_map_from_config(config)


cli.add_command(resolve_cmd)
cli.add_command(tags_cmd)
cli.add_command(config_cmd)


def main():
    cli()


if __name__ == "__main__":
    main()
