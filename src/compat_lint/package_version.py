"""package.json version lookup with a process-wide cache."""
import json
import threading
from pathlib import Path

from compat_lint.errors import ManifestReadError, MissingVersionFieldError
from compat_lint.logging_config import get_logger

logger = get_logger(__name__)


class PackageVersionLookup:
    """Memoizes the version of each package.json by path.

    Thread-safe: the lock only guards the dict. Two threads asking for the
    same uncached manifest may both read it; manifests do not change during
    a run, so both store the same value.
    """

    def __init__(self) -> None:
        self._versions: dict[str, str] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def version_of(self, package_json_path: str) -> str:
        """Return the version declared in ``package_json_path``.

        Args:
            package_json_path: Path to a package.json file

        Returns:
            Version string

        Raises:
            ManifestReadError: If the file is missing, unreadable or not JSON
            MissingVersionFieldError: If there is no non-empty version string
        """
        with self._lock:
            cached = self._versions.get(package_json_path)
            if cached is not None:
                self.hits += 1
                return cached
            self.misses += 1

        version = _read_version(package_json_path)

        with self._lock:
            self._versions[package_json_path] = version
        return version

    def clear(self) -> None:
        """Drop all cached versions and reset counters."""
        with self._lock:
            self._versions.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._versions)


def _read_version(package_json_path: str) -> str:
    logger.debug(f"Reading {package_json_path}")
    try:
        with Path(package_json_path).open(encoding="utf-8") as f:
            manifest = json.load(f)
    except OSError as e:
        raise ManifestReadError(package_json_path, str(e)) from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ManifestReadError(package_json_path, f"invalid JSON: {e}") from e

    version = manifest.get("version") if isinstance(manifest, dict) else None
    if not isinstance(version, str) or not version:
        raise MissingVersionFieldError(package_json_path)
    return version


_default_lookup = PackageVersionLookup()


def get_default_lookup() -> PackageVersionLookup:
    """Return the lookup shared by the whole process."""
    return _default_lookup


def get_package_version(package_json_path: str) -> str:
    """Version of a package.json, cached for the lifetime of the process."""
    return _default_lookup.version_of(package_json_path)


def clear_version_cache() -> None:
    _default_lookup.clear()
