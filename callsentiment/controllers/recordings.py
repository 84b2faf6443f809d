"""Webhook controller for call-recording notifications.

The POST handler acknowledges immediately and hands the job to
``FulfillmentPipeline.run`` as a background task, so the caller is released
before any remote call is made and never learns the job's outcome. See
``callsentiment.pipelines.fulfillment.flow`` for the stage order.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Response, status

from callsentiment.config.settings import settings
from callsentiment.controllers.dependencies import PipelineDep
from callsentiment.pipelines.fulfillment import FulfillmentFlow
from callsentiment.utils import job_context
from callsentiment.views import RecordingNotification

router = APIRouter(tags=["recordings"])

logger = logging.getLogger(__name__)

PIPELINE_STAGES = tuple(FulfillmentFlow.describe())
"""Ordered pipeline metadata used for quick reference and debugging."""


@router.post(settings.webhook_path, response_class=Response)
async def receive_recording(
    notification: RecordingNotification,
    background_tasks: BackgroundTasks,
    pipeline: PipelineDep,
) -> Response:
    """Acknowledge a recording notification and fulfil it after responding."""

    job = notification.to_job()
    logger.info(
        "contact_id=%s stage=received - acknowledged, fileName:%s",
        job.contact_id,
        job.file_name,
        extra=job_context(job.contact_id, "received"),
    )
    background_tasks.add_task(pipeline.run, job)
    return Response(status_code=status.HTTP_200_OK)
