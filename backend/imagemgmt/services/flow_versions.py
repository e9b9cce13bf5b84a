"""
Version resolution for the job types of a flow.

Before a flow's pod is created every job type it uses is bound to an image
version. With sticky selection the flow's "<project>.<flow>" name is the
draw key, so a flow keeps running the same versions during a rollout.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Set

from imagemgmt.core.config import settings
from imagemgmt.models.enums import SelectionStrategy
from imagemgmt.services.batch_resolver import BatchResolver
from imagemgmt.services.flow_utils import (
    FlowNode,
    OverrideLookup,
    get_job_type_users_for_flow,
    get_job_types_for_flow,
    get_proxy_users_for_flow,
)
from imagemgmt.services.rampup_resolver import DeterministicDraw, RandomDraw

logger = logging.getLogger(__name__)


@dataclass
class FlowImagePlan:
    """Image versions and proxy users needed to launch a flow's container."""
    flow_name: str
    versions: Dict[str, str] = field(default_factory=dict)
    proxy_users: Set[str] = field(default_factory=set)


async def resolve_flow_versions(
    batch_resolver: BatchResolver,
    project_name: str,
    flow_id: str,
    flow: FlowNode,
    sticky: Optional[bool] = None,
    base_image_types: Iterable[str] = (),
    override_lookup: Optional[OverrideLookup] = None,
) -> FlowImagePlan:
    """
    Resolve image versions for every job type used by a flow.

    Args:
        batch_resolver: Batch resolver backed by the image store
        project_name: Project of the flow
        flow_id: Flow id within the project
        flow: Root node of the flow
        sticky: Key the draw on the flow name instead of drawing at random
            (default: settings.DEFAULT_SELECTION_STRATEGY is "deterministic")
        base_image_types: Image types needed regardless of jobs (e.g. the executor image)
        override_lookup: Job override props lookup for proxy user resolution

    Raises:
        AggregateResolutionError: If any job type cannot be resolved
    """
    flow_name = f"{project_name}.{flow_id}"
    job_types = get_job_types_for_flow(flow)
    image_types = set(job_types) | set(base_image_types)
    if sticky is None:
        sticky = settings.DEFAULT_SELECTION_STRATEGY == SelectionStrategy.DETERMINISTIC.value
    strategy = DeterministicDraw(flow_name) if sticky else RandomDraw()

    logger.info(f"Resolving image versions for flow {flow_name}: {sorted(image_types)}")
    versions = await batch_resolver.resolve_all(image_types, strategy)

    proxy_users = get_proxy_users_for_flow(flow, override_lookup)
    proxy_users |= get_job_type_users_for_flow(job_types)
    return FlowImagePlan(flow_name=flow_name, versions=versions, proxy_users=proxy_users)
