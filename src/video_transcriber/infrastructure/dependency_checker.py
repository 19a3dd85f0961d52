"""Version probe for the external programs the pipeline drives."""

from video_transcriber.config import ToolsConfig
from video_transcriber.exceptions import DependencyMissingError
from video_transcriber.infrastructure.command_executor import CommandExecutor
from video_transcriber.logging import setup_logging

logger = setup_logging()


class DependencyChecker:
    """Checks that yt-dlp, whisper and ffmpeg are installed and runnable."""

    def __init__(self, executor: CommandExecutor, config: ToolsConfig):
        self._executor = executor
        self._probes = {
            "yt-dlp": [config.ytdlp_binary, "--version"],
            "whisper": [config.whisper_binary, "--help"],
            "ffmpeg": [config.ffmpeg_binary, "-version"],
        }
        self._verified = False

    async def check(self) -> list[str]:
        """Returns the names of the tools whose probe failed."""
        missing = []
        for name, args in self._probes.items():
            outcome = await self._executor.execute(args)
            if not outcome.success:
                missing.append(name)
        if missing:
            logger.warning("External tools missing", extra={"missing": missing})
        return missing

    async def ensure_available(self) -> None:
        """
        Raises DependencyMissingError unless every tool is present.

        A successful check is remembered for the life of the checker.
        """
        if self._verified:
            return
        missing = await self.check()
        if missing:
            raise DependencyMissingError(missing)
        self._verified = True
        logger.info("External tools verified", extra={"tools": list(self._probes)})
