"""
Release service for nexttag.

Runs one complete tagging pass for a repository:
1. Find the branch to tag (forced branch, else the ref that triggered the run)
2. Resolve the next version
3. Publish the tag at the branch head, unless this is a dry run

Used by the `nexttag resolve` command.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..domain.bump import BumpLevel
from ..domain.decision import VersionDecision
from ..domain.policy import ReleasePolicy
from ..domain.tag import Branch
from ..exit_codes import UnknownBranchError
from ..infra.actions import branch_from_ref
from .resolver import ResolveRequest, VersionResolver

logger = logging.getLogger(__name__)


@dataclass
class ReleaseOptions:
    """Options for a tagging run."""
    branch: Optional[str] = None        # Forced branch, overrides ref
    ref: Optional[str] = None           # Ref that triggered the run
    bump: BumpLevel = BumpLevel.PATCH
    with_v: bool = True
    custom_tag: Optional[str] = None
    prerelease_label: Optional[str] = None
    dry_run: bool = False

    @property
    def prefix(self) -> str:
        return "v" if self.with_v else ""


@dataclass
class ReleaseResult:
    """Outcome of a tagging run."""
    branch: Branch
    decision: VersionDecision
    tag_name: str
    created: bool = False
    dry_run: bool = False

    def outputs(self) -> Dict[str, str]:
        """Step outputs: the current latest tag and the next tag."""
        outputs = {'new-tag': self.decision.result}
        if not self.decision.custom:
            outputs['tag'] = self.decision.current_tag
        return outputs

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'branch': self.branch.full_name,
            'sha': self.branch.head_sha,
            'tag': self.decision.current_tag if not self.decision.custom else None,
            'new_tag': self.decision.result,
            'tag_name': self.tag_name,
            'created': self.created,
            'dry_run': self.dry_run,
        }
        data.update({f"decision_{k}": v for k, v in self.decision.to_dict().items()
                     if k not in ('result', 'latest_tag')})
        return data


class ReleaseService:
    """
    Orchestrates branch lookup, version resolution and tag publication.

    Example:
        client = GitHubClient.for_repository("octo/widgets")
        service = ReleaseService(client, ReleasePolicy.from_options("^main$"))
        result = service.run(ReleaseOptions(ref="refs/heads/main", dry_run=True))
        print(result.decision.result)
    """

    def __init__(self, client, policy: ReleasePolicy):
        """
        Initialize ReleaseService.

        Args:
            client: GitHubClient (or any object with the same methods)
            policy: Release policy for the run
        """
        self.client = client
        self.policy = policy
        self.resolver = VersionResolver(policy, client)
        self.last_result: Optional[ReleaseResult] = None

    def load_branch(self, options: ReleaseOptions) -> Branch:
        """
        Find the branch to tag.

        Raises:
            UnknownBranchError: If the forced or active branch does not exist
        """
        if options.branch:
            logger.info(f"check forced branch {options.branch}")
            branch = self.client.find_branch_ref(options.branch)
            if branch is None:
                raise UnknownBranchError(options.branch)
            logger.info("branch confirmed, continue")
            return branch

        if not options.ref:
            raise UnknownBranchError("", "no branch given and no ref in the run context")

        active = branch_from_ref(options.ref)
        logger.info(f"load the history of active branch {active} from context ref {options.ref}")
        branch = self.client.find_branch_ref(active)
        if branch is None:
            raise UnknownBranchError(active, f"failed to load branch {active}")
        return branch

    def run(self, options: ReleaseOptions) -> ReleaseResult:
        """
        Resolve the next tag and publish it.

        Args:
            options: Tagging options

        Returns:
            ReleaseResult; ``created`` is False for dry runs

        Raises:
            NextTagError: Any failure aborts the run before a tag is created
        """
        branch = self.load_branch(options)
        logger.info(f"active branch name is {branch.full_name}")

        request = ResolveRequest(
            branch=branch,
            bump=options.bump,
            custom_tag=options.custom_tag,
            prerelease_label=options.prerelease_label,
        )
        decision = self.resolver.resolve(request)
        tag_name = decision.tag_name(options.prefix)

        result = ReleaseResult(
            branch=branch,
            decision=decision,
            tag_name=tag_name,
            dry_run=options.dry_run,
        )

        if options.dry_run:
            logger.info("dry run, tag not published")
        else:
            logger.info(f"publish tag {tag_name}")
            self.client.create_tag_ref(tag_name, branch.head_sha)
            result.created = True

        self.last_result = result
        return result
