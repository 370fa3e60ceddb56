"""Configuration management for compat-lint."""
import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

CONFIG_FILENAME = ".compat-lint.json"


class RestrictedImport(BaseModel):
    """Exports of one module that must not be used."""

    module: str = Field(min_length=1, description="Module specifier, e.g. 'react-dom'")
    imports: list[str] = Field(min_length=1, description="Restricted export names")

    @field_validator("imports")
    @classmethod
    def validate_imports(cls, v: list[str]) -> list[str]:
        """Ensure export names are non-empty strings."""
        for name in v:
            if not name.strip():
                raise ValueError("restricted import names cannot be empty strings")
        return v

    model_config = {"frozen": True}


# APIs removed in React 19
DEFAULT_RESTRICTED_IMPORTS = [
    RestrictedImport(
        module="react-dom",
        imports=[
            "findDOMNode",
            "render",
            "hydrate",
            "unmountComponentAtNode",
            "unstable_renderSubtreeIntoContainer",
            "unstable_flushControlled",
            "unstable_createEventHandle",
            "unstable_runWithPriority",
        ],
    ),
    RestrictedImport(module="react", imports=["createFactory"]),
]


class Config(BaseModel):
    """Configuration for compat-lint with validation."""

    restricted_imports: list[RestrictedImport] = Field(
        default_factory=lambda: list(DEFAULT_RESTRICTED_IMPORTS),
        min_length=1,
        description="Modules and the exports that must not be used",
    )
    allowed_packages: list[str] = Field(
        default_factory=list, description="Packages whose violations are accepted"
    )
    exclude: list[str] = Field(
        default_factory=lambda: ["**/*.d.ts"], description="File patterns to skip"
    )
    max_workers: int = Field(default=8, gt=0, le=64, description="Files analyzed in parallel")
    max_file_size_mb: float = Field(default=5.0, gt=0, le=50, description="Maximum file size in MB")
    fail_fast: bool = Field(default=False, description="Abort on the first per-file error")
    show_progress: bool = Field(default=True, description="Show progress bars")

    @field_validator("restricted_imports")
    @classmethod
    def validate_unique_modules(cls, v: list[RestrictedImport]) -> list[RestrictedImport]:
        """Each module may only be listed once."""
        seen = set()
        for entry in v:
            if entry.module in seen:
                raise ValueError(f"module listed more than once: {entry.module}")
            seen.add(entry.module)
        return v

    model_config = {"frozen": False}


def get_default_config() -> Config:
    """Return default configuration.

    Returns:
        Config with default values
    """
    return Config()


def load_config(config_path: Path) -> Config:
    """Load configuration from file or return defaults.

    Supports both snake_case (preferred) and camelCase keys.

    Args:
        config_path: Path to .compat-lint.json file

    Returns:
        Config object with loaded or default values

    Raises:
        ValueError: If the file is not valid JSON
        pydantic.ValidationError: If configuration values are invalid
    """
    if not config_path.exists():
        return get_default_config()

    with config_path.open(encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a JSON object")

    defaults = get_default_config()

    config_data = {
        "restricted_imports": data.get(
            "restricted_imports", data.get("restrictedImports", defaults.restricted_imports)
        ),
        "allowed_packages": data.get(
            "allowed_packages", data.get("allowedPackages", defaults.allowed_packages)
        ),
        "exclude": data.get("exclude", defaults.exclude),
        "max_workers": data.get("max_workers", data.get("maxWorkers", defaults.max_workers)),
        "max_file_size_mb": data.get(
            "max_file_size_mb", data.get("maxFileSizeMb", defaults.max_file_size_mb)
        ),
        "fail_fast": data.get("fail_fast", data.get("failFast", defaults.fail_fast)),
        "show_progress": data.get(
            "show_progress", data.get("showProgress", defaults.show_progress)
        ),
    }

    return Config(**config_data)
