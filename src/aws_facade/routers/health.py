from fastapi import APIRouter, Depends

from aws_facade.aws.clients import AWSClientManager
from aws_facade.config.settings import Settings
from aws_facade.dependencies import get_app_settings, get_client_manager

router = APIRouter()

# One cheap read-only call per service
_COMPONENT_PROBES = {
    "s3": lambda client: client.list_buckets(),
    "sqs": lambda client: client.list_queues(),
    "sns": lambda client: client.list_topics(),
}


@router.get("/health")
def health_check(
    settings: Settings = Depends(get_app_settings),
    aws_clients: AWSClientManager = Depends(get_client_manager),
):
    """
    Health check endpoint for monitoring API status and component readiness.

    Returns the status of each AWS service the API fronts, along with the
    deployment mode and the endpoint the clients talk to.
    """
    health_status = {
        "status": "ok",
        "deployment_mode": settings.deployment_mode,
        "endpoint_url": settings.aws_endpoint_url if settings.uses_local_endpoint else None,
        "components": {},
        "ready": False,
    }

    for component, probe in _COMPONENT_PROBES.items():
        try:
            probe(aws_clients.get_client(component))
            health_status["components"][component] = "ready"
        except Exception as e:
            health_status["components"][component] = f"error: {str(e)}"
            health_status["status"] = "degraded"

    health_status["ready"] = all(
        state == "ready" for state in health_status["components"].values()
    )
    return health_status
