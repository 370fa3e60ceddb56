"""Exceptions raised while linting a dependency tree."""


class CompatLintError(Exception):
    """Base class for compat-lint errors."""


class NotInDependencyTreeError(CompatLintError, ValueError):
    """File path has no node_modules segment to attribute it to a package."""

    def __init__(self, file_path: str):
        super().__init__(f"Path does not contain node_modules: {file_path}")
        self.file_path = file_path


class ManifestReadError(CompatLintError):
    """package.json is missing, unreadable, or not valid JSON."""

    def __init__(self, manifest_path: str, reason: str):
        super().__init__(f"Cannot read package.json at {manifest_path}: {reason}")
        self.manifest_path = manifest_path


class MissingVersionFieldError(CompatLintError):
    """package.json has no usable version field."""

    def __init__(self, manifest_path: str):
        super().__init__(f"No version field found in package.json at {manifest_path}")
        self.manifest_path = manifest_path


class MalformedSyntaxError(CompatLintError):
    """Source file could not be parsed cleanly."""

    def __init__(self, file_path: str, line: int, column: int):
        super().__init__(f"Syntax error in {file_path} at {line}:{column}")
        self.file_path = file_path
        self.line = line
        self.column = column
