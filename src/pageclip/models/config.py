"""Pydantic configuration models for pageclip."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

# Content containers, in priority order
DEFAULT_CONTENT_SELECTORS = [
    "article",
    '[role="main"]',
    '[itemprop="articleBody"]',
    "main",
    ".post-content",
    ".entry-content",
    ".article-content",
    ".article-body",
    ".post-body",
    ".content-body",
    "#content",
    ".content",
    ".post",
    ".entry",
]

# Boilerplate stripped from the content clone
DEFAULT_REMOVE_SELECTORS = [
    "script",
    "style",
    "noscript",
    "nav",
    "footer",
    "header",
    "aside",
    '[role="navigation"]',
    '[role="banner"]',
    '[role="contentinfo"]',
    ".nav",
    ".navbar",
    ".footer",
    ".header",
    ".sidebar",
    ".menu",
    ".ad",
    ".ads",
    ".advertisement",
    ".social-share",
    ".share-buttons",
    ".comments",
    "#comments",
    ".related-posts",
    ".recommended",
    "form",
    "iframe",
    "svg",
    "button",
    ".button",
    "[hidden]",
    '[aria-hidden="true"]',
]

# Landmarks whose descendants never win the density scan
DEFAULT_DENSITY_EXCLUDE = "nav, header, footer, aside, .sidebar, .menu, .nav"

# Lazy-loading attributes, in the order they are trusted
DEFAULT_LAZY_ATTRIBUTES = [
    "data-src",
    "data-lazy-src",
    "data-original",
    "data-lazy",
    "data-ll-src",
    "data-large_image",
    "data-full-url",
    "data-zoom-image",
]

DEFAULT_LAZY_CLASSES = ["lazy", "lazyload", "lazyloaded", "loaded"]


class ExtractionConfig(BaseModel):
    """Configuration for locating and sanitizing the main content."""

    content_selectors: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CONTENT_SELECTORS),
        description="CSS selectors tried in order to find the content root",
    )
    remove_selectors: list[str] = Field(
        default_factory=list,
        description="Extra CSS selectors to strip (extends the defaults)",
    )
    min_selector_text: int = Field(
        200,
        ge=0,
        description="A selector match must carry more than this many characters of text",
    )
    density_min_text: int = Field(
        500,
        ge=0,
        description="Minimum text length for a density-scan candidate",
    )
    density_min_paragraphs: int = Field(
        2,
        ge=1,
        description="Minimum paragraph count for a density-scan candidate",
    )
    density_exclude: str = Field(
        DEFAULT_DENSITY_EXCLUDE,
        description="Selector of landmarks excluded from the density scan",
    )

    model_config = {"extra": "forbid"}

    @property
    def all_remove_selectors(self) -> list[str]:
        """Default boilerplate selectors followed by the configured extras."""
        return DEFAULT_REMOVE_SELECTORS + [s for s in self.remove_selectors if s not in DEFAULT_REMOVE_SELECTORS]


class ImageConfig(BaseModel):
    """Configuration for image resolution and collection."""

    max_images: int = Field(20, ge=0, description="Maximum number of collected page images")
    min_width: int = Field(
        100,
        ge=0,
        description="Images narrower than this (in natural pixels) are skipped unless lazy-loaded",
    )
    lazy_attributes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LAZY_ATTRIBUTES),
        description="Lazy-loading attributes checked after srcset, in priority order",
    )
    lazy_classes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LAZY_CLASSES),
        description="Class names that mark an image as lazy-loaded",
    )

    model_config = {"extra": "forbid"}


class RenderConfig(BaseModel):
    """Configuration for Markdown rendering."""

    max_length: int = Field(50_000, ge=1, description="Maximum rendered Markdown length in characters")

    model_config = {"extra": "forbid"}


class BridgeConfig(BaseModel):
    """Configuration for request/response messaging."""

    timeout: float = Field(10.0, gt=0, description="Seconds before a pending request is evicted")
    id_prefix: str = Field("stt", min_length=1, description="Prefix for generated message ids")
    request_source: str = Field("save-to-thymer-bridge", description="Source tag on request envelopes")
    response_source: str = Field("thymer-plugin-stt", description="Source tag on response envelopes")

    model_config = {"extra": "forbid"}


class ClipConfig(BaseModel):
    """
    Root configuration model for pageclip.

    Example:
        config = ClipConfig(
            images=ImageConfig(max_images=10),
            render=RenderConfig(max_length=20_000),
        )

    YAML format:
        extraction:
          remove_selectors:
            - .newsletter
        images:
          max_images: 10
        log_level: DEBUG
    """

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    images: ImageConfig = Field(default_factory=ImageConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    bridge: BridgeConfig = Field(default_factory=BridgeConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ClipConfig":
        """Load config from YAML string."""
        import yaml

        try:
            data = yaml.safe_load(yaml_str) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML config: {e}") from e
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ClipConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
