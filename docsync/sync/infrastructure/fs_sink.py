import json
import shutil
from pathlib import Path, PurePosixPath

from docsync.config.logger_config import logger
from docsync.config.settings import SUMMARY_FILENAME, SYNC_INFO_FILENAME
from docsync.sync.domain.models import SourceConfig, SyncResult


def _join_or(values: tuple[str, ...], fallback: str) -> str:
    return ", ".join(values) if values else fallback


class DocsTreeSink:
    """Every write into one source's target directory goes through here."""

    def __init__(self, target_dir: str | Path) -> None:
        self.target_dir = Path(target_dir)

    def reset(self) -> None:
        if self.target_dir.exists():
            logger.info("Cleaning target directory: {}", str(self.target_dir))
            shutil.rmtree(self.target_dir)
        self.target_dir.mkdir(parents=True, exist_ok=True)

    def ensure_directory(self, relative_path: PurePosixPath) -> Path:
        dir_path = self.target_dir.joinpath(*relative_path.parts)
        dir_path.mkdir(parents=True, exist_ok=True)
        return dir_path

    def write_document(self, relative_path: PurePosixPath, content: str) -> Path:
        file_path = self.target_dir.joinpath(*relative_path.parts)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8", newline="\n")
        return file_path

    def write_sync_info(self, source: SourceConfig, synced_at: str) -> Path:
        file_path = self.target_dir / SYNC_INFO_FILENAME
        content = (
            f"# {source.name} Documentation Sync\n"
            "\n"
            "## Configuration\n"
            f"- **Source:** {source.name} ({source.type})\n"
            f"- **Repository:** [{source.repository_id}]({source.repository_url})\n"
            f"- **Source Path:** `{source.source_path}`\n"
            f"- **Last Sync:** {synced_at}\n"
            f"- **MDX Conversion:** {'Enabled' if source.convert_format else 'Disabled'}\n"
            f"- **File Extensions:** {_join_or(source.file_extensions, 'None')}\n"
            "\n"
            "## Sync Settings\n"
            f"- **Exclude Patterns:** {_join_or(source.exclude_patterns, 'None')}\n"
            f"- **Include Patterns:** {_join_or(source.include_patterns, 'All files')}\n"
            "\n"
            "## About\n"
            "This directory is regenerated on every sync. Local edits will be overwritten.\n"
        )
        file_path.write_text(content, encoding="utf-8", newline="\n")
        return file_path

    def write_summary(self, result: SyncResult) -> Path:
        file_path = self.target_dir / SUMMARY_FILENAME
        file_path.write_text(
            json.dumps(result.to_dict(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info("Sync summary written: {}", str(file_path))
        return file_path
