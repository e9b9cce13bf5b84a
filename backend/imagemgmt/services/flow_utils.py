"""
Helpers for containerized dispatch of a flow.

A flow is a tree of FlowNode: nodes of type "flow" hold children, every
other node is a job. Traversal uses an explicit stack so arbitrarily deep
flows cannot exhaust the interpreter's recursion limit.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from imagemgmt.core.config import settings

USER_TO_PROXY = "user.to.proxy"
DISABLED = "DISABLED"
FLOW_TYPE = "flow"


@dataclass
class FlowNode:
    """A job or an embedded flow within an executable flow."""
    id: str
    type: Optional[str] = None
    status: str = "READY"
    props: Dict[str, str] = field(default_factory=dict)
    children: List["FlowNode"] = field(default_factory=list)

    @property
    def is_flow(self) -> bool:
        return self.type == FLOW_TYPE


# Returns the job override props set from the UI for a node, if any
OverrideLookup = Callable[[FlowNode], Optional[Dict[str, str]]]


def iter_enabled_jobs(flow: FlowNode) -> Iterator[FlowNode]:
    """Yield the non-disabled job nodes of a flow in depth-first order."""
    stack = [flow]
    while stack:
        node = stack.pop()
        if node.is_flow:
            stack.extend(reversed(node.children))
        elif node.status != DISABLED:
            yield node


def get_job_types_for_flow(flow: FlowNode) -> List[str]:
    """
    Get the sorted job types of a flow.

    Disabled jobs are skipped: no container image is needed for them.
    """
    return sorted({node.type for node in iter_enabled_jobs(flow) if node.type})


def get_proxy_users_for_flow(flow: FlowNode, override_lookup: Optional[OverrideLookup] = None) -> Set[str]:
    """
    Collect the proxy users of the enabled jobs of a flow.

    A job override of user.to.proxy takes precedence over the job's own property.
    """
    proxy_users = set()
    for node in iter_enabled_jobs(flow):
        overrides = (override_lookup(node) if override_lookup else None) or {}
        user = overrides.get(USER_TO_PROXY) or node.props.get(USER_TO_PROXY)
        if user:
            proxy_users.add(user)
    return proxy_users


def parse_prefetch_user_map(prefetch_user_map: str) -> List[Tuple[str, str]]:
    """Parse "jobtype1,user1;jobtype2,user2" into (job type, user) pairs."""
    pairs = []
    for pair in prefetch_user_map.split(";"):
        job_type, _, user = pair.partition(",")
        if job_type.strip() and user.strip():
            pairs.append((job_type.strip(), user.strip()))
    return pairs


def get_job_type_users_for_flow(job_types: Iterable[str], prefetch_user_map: Optional[str] = None) -> Set[str]:
    """
    Get the prefetch users of the job types present in a flow.

    Args:
        job_types: Job types of the flow
        prefetch_user_map: Mapping string (default: settings.JOBTYPE_PREFETCH_USER_MAP)
    """
    if prefetch_user_map is None:
        prefetch_user_map = settings.JOBTYPE_PREFETCH_USER_MAP
    job_types = set(job_types)
    return {
        user for job_type, user in parse_prefetch_user_map(prefetch_user_map)
        if job_type in job_types
    }
