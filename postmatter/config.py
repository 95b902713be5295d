from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_FILENAME = "postmatter.yml"


class FrontMatterSchema(BaseModel):
    """Field rules applied to a post's front matter.

    The default requires ``layout`` and ``title``. Sites can override it
    globally or per layout through :class:`Config`.
    """

    required: list[str] = Field(
        default_factory=lambda: ["layout", "title"],
        description="Keys that must be present with a non-blank value.",
    )
    scalars: list[str] = Field(
        default_factory=lambda: ["layout", "title", "description"],
        description="Keys that, when present, must hold a single value.",
    )
    sequences: list[str] = Field(
        default_factory=lambda: ["tags", "categories"],
        description="Keys that, when present, must hold a list of values.",
    )
    booleans: list[str] = Field(
        default_factory=lambda: ["comments"],
        description="Keys that, when present, must be 'true' or 'false'.",
    )

    @field_validator("required", "scalars", "sequences", "booleans")
    def _strip_names(cls, value: list[str]) -> list[str]:
        cleaned = [name.strip() for name in value]
        if any(not name for name in cleaned):
            raise ValueError("Schema field names cannot be empty.")
        return cleaned


class Config(BaseModel):
    project_name: str = Field(default="Postmatter Project")
    content_dir: Path = Field(default=Path("_posts"))
    output_dir: Path = Field(default=Path("_site/data"))
    workers: int = Field(
        default=1,
        ge=1,
        description="Number of threads used to parse and validate posts.",
    )
    manifest_page_size: int = Field(
        default=200,
        ge=1,
        description="Maximum number of posts per manifest page.",
    )
    front_matter: FrontMatterSchema = Field(default_factory=FrontMatterSchema)
    layouts: dict[str, FrontMatterSchema] = Field(
        default_factory=dict,
        description="Schema overrides keyed by the post's 'layout' value.",
    )

    @field_validator("content_dir", "output_dir", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    def schema_for(self, layout: str | None) -> FrontMatterSchema:
        if layout and layout in self.layouts:
            return self.layouts[layout]
        return self.front_matter


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    ``path`` may point to a config file or to a directory. A directory without
    a ``postmatter.yml`` yields the defaults anchored to that directory.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    if candidate.is_dir():
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            data = _read_yaml(config_file)
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        data = _read_yaml(candidate)
        base_dir = candidate.parent.resolve()

    cfg = Config(**data)

    def _abs(value: Path) -> Path:
        return value if value.is_absolute() else (base_dir / value).resolve()

    cfg.content_dir = _abs(cfg.content_dir)
    cfg.output_dir = _abs(cfg.output_dir)
    return cfg


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {path} must be a mapping.")
    return data
