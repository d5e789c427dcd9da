"""
The main orchestrator: resolves an integration into its download manifest and
hands the manifest to the download manager.
"""

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from pennsieve_fetch.api.client import PennsieveAPIClient
from pennsieve_fetch.models.integration import Integration, Manifest
from pennsieve_fetch.models.stats import RunStats
from pennsieve_fetch.utils.structured_logger import APILogger, SessionLogger

from .download_manager import DownloadManager

DocumentT = TypeVar("DocumentT", bound=BaseModel)


class IntegrationRunner:
    """Runs one integration end to end."""

    def __init__(
        self,
        integration_id: str,
        api_client: PennsieveAPIClient,
        download_manager: DownloadManager,
        session_logger: SessionLogger,
        api_logger: APILogger,
    ):
        self.integration_id = integration_id
        self.api_client = api_client
        self.download_manager = download_manager
        self.session_log = session_logger
        self.api_log = api_logger

    def _decode(self, model: type[DocumentT], body: bytes) -> DocumentT:
        """
        Decodes a response body, falling back to an empty document.

        Undecodable bodies (error pages, non-2xx JSON of another shape) are
        logged and do not stop the run.
        """
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            self.api_log.decode_failed(model.__name__, str(e))
            return model()

    async def execute(self) -> RunStats:
        """
        Performs the run.

        Raises:
            TransportError: If either API host cannot be reached. No file is
            downloaded in that case.
        """
        self.session_log.logger.set_session_context(integration_id=self.integration_id)
        self.session_log.run_started(self.integration_id)

        body = await self.api_client.fetch_integration(self.integration_id)
        integration = self._decode(Integration, body)
        self.session_log.integration_loaded(
            integration.uuid,
            integration.dataset_id,
            integration.application_id,
            len(integration.package_ids),
        )

        body = await self.api_client.fetch_download_manifest(integration.package_ids)
        manifest = self._decode(Manifest, body)
        self.session_log.manifest_loaded(len(manifest))

        stats = await self.download_manager.download_all(manifest)
        self.session_log.run_completed(
            stats.duration_s,
            stats.files_total,
            stats.files_downloaded,
            stats.files_failed,
        )
        return stats
