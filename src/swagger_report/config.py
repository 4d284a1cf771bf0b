"""Report configuration: endpoint ordering and suppressed field names."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from swagger_report.errors import ConfigError


class ReportConfig(BaseModel):
    """Immutable settings for one report run.

    ``order`` maps an endpoint path to its priority (lower renders first);
    paths without a priority follow in lexical order. Names in ``ignored``
    never appear as a row in any parameter or field table.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    order: dict[str, int] = {}
    ignored: frozenset[str] = frozenset()

    def priority(self, path: str) -> int | None:
        return self.order.get(path)

    def is_ignored(self, name: str) -> bool:
        return name in self.ignored

    def merged(self, order: dict[str, int] | None = None, ignored: set[str] | None = None) -> "ReportConfig":
        """Return a copy with *order* entries and *ignored* names added on top."""
        return ReportConfig(
            order={**self.order, **(order or {})},
            ignored=self.ignored | frozenset(ignored or ()),
        )


def load_config(file_path: Path) -> ReportConfig:
    """Load a ReportConfig from a YAML or JSON file.

    Example::

        order:
          /api/user/register: 1
          /api/user/query: 2
        ignored:
          - _app_id
    """
    text = file_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"{file_path}: not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{file_path}: config root must be a mapping")
    try:
        return ReportConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"{file_path}: {e}") from e
