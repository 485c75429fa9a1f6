"""
Resolve command for nexttag.

Computes the next tag of a branch and publishes it. Options mirror the
inputs of the GitHub Action, so inside a workflow every option can also be
given as ``INPUT_<NAME>``.
"""

import logging

import click

from ..cli_utils import github_options, handle_errors, make_client
from ..domain.bump import BumpLevel, RELEASE_LEVELS
from ..domain.policy import ReleasePolicy
from ..infra.actions import active_ref, write_outputs
from ..output import emit
from ..services.release_service import ReleaseOptions, ReleaseService

logger = logging.getLogger(__name__)


@click.command("resolve")
@github_options
@click.option("--branch", envvar="INPUT_BRANCH",
              help="Tag this branch instead of the one that triggered the run")
@click.option("--ref", help="Ref that triggered the run (defaults to GITHUB_HEAD_REF / GITHUB_REF)")
@click.option("--bump", type=click.Choice(RELEASE_LEVELS, case_sensitive=False),
              envvar="INPUT_BUMP", default="patch", show_default=True,
              help="Bump level for release branches when no commit asks for one")
@click.option("--release-branch", "release_branches", envvar="INPUT_RELEASE-BRANCH",
              help="Comma-separated regexes of release branches")
@click.option("--with-v/--no-with-v", "with_v", envvar="INPUT_WITH-V", default=True,
              help="Prefix published tags with 'v'")
@click.option("--tag", "custom_tag", envvar="INPUT_TAG",
              help="Publish this exact tag instead of computing one")
@click.option("--issue-labels", envvar="INPUT_ISSUE-LABELS",
              help="Comma-separated issue labels that make a fix a minor release")
@click.option("--prerelease-label", envvar="INPUT_PRERELEASE-LABEL",
              help="Pre-release channel name (defaults to the branch name)")
@click.option("--dry-run", is_flag=True, envvar="INPUT_DRY-RUN",
              help="Compute the tag without publishing it")
@click.option("--output-file", envvar="GITHUB_OUTPUT", type=click.Path(dir_okay=False),
              help="Append 'tag' and 'new-tag' step outputs to this file")
@click.option("--pretty", is_flag=True, help="Display as a table instead of JSONL")
@click.pass_context
@handle_errors
def resolve_cmd(ctx, repository, token, branch, ref, bump, release_branches, with_v,
                custom_tag, issue_labels, prerelease_label, dry_run, output_file, pretty):
    """Compute the next version tag and publish it.

    \b
    Release branches get a plain release; the level comes from commit
    markers (#major, #minor, #patch, fixes #N) since the last release, or
    --bump when there are none. Other branches get a pre-release scoped to
    the branch, e.g. 1.3.0-beta.2.

    \b
    Examples:
        nexttag resolve --repo octo/widgets --ref refs/heads/main --dry-run
        nexttag resolve --branch beta --no-with-v
        nexttag resolve --tag 2.0.0-special
    """
    client = make_client(ctx, repository, token)
    logger.info(f"run for {client.full_name}")

    policy = ReleasePolicy.from_options(release_branches, issue_labels)
    options = ReleaseOptions(
        branch=branch or None,
        ref=ref or active_ref(),
        bump=BumpLevel.parse(bump),
        with_v=with_v,
        custom_tag=custom_tag or None,
        prerelease_label=prerelease_label or None,
        dry_run=dry_run,
    )

    result = ReleaseService(client, policy).run(options)

    if write_outputs(result.outputs(), output_file):
        logger.debug("step outputs written")

    if pretty:
        emit([result], pretty=True,
             columns=['branch', 'tag', 'new_tag', 'tag_name', 'created', 'dry_run'],
             title=f"nexttag {client.full_name}")
    else:
        emit([result])
