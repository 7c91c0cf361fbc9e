import logging
import shutil
import time
from datetime import datetime, timezone as dt_timezone
from pathlib import Path

from django.conf import settings
from django.db import connections
from django.utils import timezone

from donations.exceptions import NotFound, ValidationFailed
from donations.services.audit_service import AuditService

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".db"


def _stat_time(timestamp):
    return datetime.fromtimestamp(timestamp, tz=dt_timezone.utc)


class BackupService:
    """
    Snapshots of the SQLite database file.

    A backup is a plain copy of the database file in BACKUP_DIR named
    <name>.db. Restoring copies a backup over the live file after taking a
    pre_restore_<epoch-ms>.db snapshot of the current one.
    """

    def __init__(self, backup_dir=None, database_path=None):
        self.backup_dir = Path(backup_dir or settings.BACKUP_DIR)
        self._database_path = database_path
        self.audit = AuditService()

    @property
    def database_path(self) -> Path:
        if self._database_path:
            return Path(self._database_path)
        db = settings.DATABASES["default"]
        name = str(db.get("NAME") or "")
        if not db["ENGINE"].endswith("sqlite3") or not name or name == ":memory:" or "mode=memory" in name:
            raise ValidationFailed("Database backups are only supported for SQLite file databases")
        return Path(name)

    @staticmethod
    def _clean_name(name: str) -> str:
        name = (name or "").strip()
        if name.endswith(BACKUP_SUFFIX):
            name = name[: -len(BACKUP_SUFFIX)]
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise ValidationFailed("Invalid backup name")
        return name

    def _backup_path(self, name: str) -> Path:
        return self.backup_dir / f"{self._clean_name(name)}{BACKUP_SUFFIX}"

    def _existing_backup(self, name: str) -> Path:
        path = self._backup_path(name)
        if not path.is_file():
            raise NotFound("Backup file not found")
        return path

    @staticmethod
    def _describe(path: Path) -> dict:
        stats = path.stat()
        return {
            "name": path.stem,
            "filename": path.name,
            "size": stats.st_size,
            "created_at": _stat_time(stats.st_ctime),
            "modified_at": _stat_time(stats.st_mtime),
        }

    def create(self, admin, name: str = None) -> dict:
        """
        Copy the database file into the backup directory.

        Args:
            admin: Acting user, None when run from the command line
            name: Backup name without extension; defaults to a timestamp

        Returns:
            dict: name, filename, size, created_at and modified_at of the backup
        """
        if not name:
            name = "backup_" + timezone.now().isoformat().replace(":", "-").replace(".", "-")
        target = self._backup_path(name)
        source = self.database_path

        self.backup_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
        logger.info(f"Database backup written to {target}")

        self.audit.record(admin, "DATABASE_BACKUP_CREATED", f"Created database backup: {target.stem}")
        return self._describe(target)

    def list(self) -> list:
        """Backups in the backup directory, newest first."""
        if not self.backup_dir.is_dir():
            return []
        backups = [
            self._describe(path)
            for path in self.backup_dir.iterdir()
            if path.is_file() and path.suffix == BACKUP_SUFFIX
        ]
        return sorted(backups, key=lambda backup: backup["modified_at"], reverse=True)

    def open_for_download(self, admin, name: str) -> Path:
        path = self._existing_backup(name)
        self.audit.record(
            admin, "DATABASE_BACKUP_DOWNLOADED", f"Downloaded database backup: {path.stem}"
        )
        return path

    def delete(self, admin, name: str) -> None:
        path = self._existing_backup(name)
        path.unlink()
        logger.info(f"Database backup {path} deleted")
        self.audit.record(admin, "DATABASE_BACKUP_DELETED", f"Deleted database backup: {path.stem}")

    def restore(self, admin, name: str) -> dict:
        """
        Replace the live database with a backup.

        Returns:
            dict: Contains 'restored_from' and 'pre_restore_backup' (the snapshot filename)
        """
        if not name:
            raise ValidationFailed("Backup name is required")
        backup = self._existing_backup(name)
        database = self.database_path

        snapshot = self.backup_dir / f"pre_restore_{int(time.time() * 1000)}{BACKUP_SUFFIX}"
        shutil.copyfile(database, snapshot)
        logger.info(f"Pre-restore snapshot written to {snapshot}")

        connections.close_all()
        shutil.copyfile(backup, database)
        logger.warning(f"Database {database} restored from {backup}")

        # The restored file may predate the acting account.
        if admin is not None and not type(admin).objects.filter(pk=admin.pk).exists():
            admin = None
        self.audit.record(admin, "DATABASE_RESTORED", f"Restored database from backup: {backup.stem}")
        return {"restored_from": backup.stem, "pre_restore_backup": snapshot.name}


def backup_size_label(size: int) -> str:
    """1536 -> '1.5 KB'."""
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size} B"
