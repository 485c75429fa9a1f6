"""
Tags command for nexttag.

Lists the version tags of a repository in precedence order and marks the
ones a branch would measure its next version against.
"""

import click

from ..cli_utils import github_options, handle_errors, make_client
from ..domain.policy import ReleasePolicy
from ..output import emit
from ..services.tag_index import TagIndex


@click.command("tags")
@github_options
@click.option("--branch", help="Mark the latest tags for this branch")
@click.option("--release-branch", "release_branches", envvar="INPUT_RELEASE-BRANCH",
              help="Comma-separated regexes of release branches")
@click.option("--pretty", is_flag=True, help="Display as a table instead of JSONL")
@click.pass_context
@handle_errors
def tags_cmd(ctx, repository, token, branch, release_branches, pretty):
    """List version tags, oldest to newest.

    Tags that are not semantic versions are left out. With --branch, the
    'latest' column marks the tag the branch resolves against and
    'latest_main' the last plain release.
    """
    client = make_client(ctx, repository, token)
    policy = ReleasePolicy.from_options(release_branches)
    index = TagIndex(client.list_tags())

    latest = latest_main = None
    if branch:
        latest = index.latest(branch, policy)
        latest_main = index.latest(branch, policy, include_prereleases=False)

    rows = []
    for tag in index.valid_tags():
        version = tag.version
        rows.append({
            'name': tag.name,
            'version': str(version),
            'prerelease': version.prerelease is not None,
            'commit_sha': tag.commit_sha[:7] if pretty else tag.commit_sha,
            'latest': tag == latest,
            'latest_main': tag == latest_main,
        })

    emit(rows, pretty=pretty, title=f"Version tags of {client.full_name}")
