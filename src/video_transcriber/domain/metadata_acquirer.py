"""Resolution of a classified reference into source metadata."""

from pathlib import Path

from video_transcriber.domain.models import (
    ClassifiedReference,
    LocalSource,
    ReferenceKind,
    RemoteSource,
    RetryNotifier,
)
from video_transcriber.domain.naming import detect_platform, extract_video_id, local_video_id
from video_transcriber.exceptions import AudioProbeError
from video_transcriber.infrastructure.interfaces import AudioExtractor, MediaDownloader
from video_transcriber.logging import setup_logging

logger = setup_logging()


class MetadataAcquirer:
    """Builds a RemoteSource or LocalSource for a validated reference."""

    def __init__(self, downloader: MediaDownloader, extractor: AudioExtractor):
        self._downloader = downloader
        self._extractor = extractor

    async def acquire(
        self,
        classified: ClassifiedReference,
        on_retry: RetryNotifier | None = None,
    ) -> RemoteSource | LocalSource:
        """
        Acquires metadata for a classified reference.

        Remote metadata comes from the download tool's metadata dump. Local
        metadata is best-effort: a failed duration probe yields 0.

        Raises:
            MetadataFetchError: If the remote metadata dump fails or is unparsable.
        """
        if classified.kind is ReferenceKind.REMOTE:
            return await self._acquire_remote(classified.reference, on_retry)
        return await self._acquire_local(classified.path)

    async def _acquire_remote(
        self, url: str, on_retry: RetryNotifier | None
    ) -> RemoteSource:
        metadata = await self._downloader.fetch_metadata(url, on_retry=on_retry)
        source = RemoteSource(
            reference=url,
            video_id=extract_video_id(url, metadata.id),
            title=metadata.resolved_title,
            channel=metadata.resolved_channel,
            duration=metadata.resolved_duration,
            upload_date=metadata.resolved_upload_date,
            platform=detect_platform(url, metadata.extractor_name),
        )
        logger.info(
            "Remote source resolved",
            extra={"video_id": source.video_id, "platform": source.platform},
        )
        return source

    async def _acquire_local(self, path: Path) -> LocalSource:
        try:
            duration = await self._extractor.probe_duration(path)
        except AudioProbeError:
            duration = 0

        return LocalSource(
            path=path,
            video_id=local_video_id(path),
            title=path.stem,
            duration=int(round(duration)),
        )
