"""Catalog models: the read-only table of known Office variants."""

from pydantic import BaseModel, ConfigDict, Field


class VersionEntry(BaseModel):
    """Catalog data for one Office generation (e.g. 2010)."""

    model_config = ConfigDict(frozen=True)

    version_tag: str  # Numeric tag used in paths and registry keys ("14" for 2010)
    product_code: str  # Default product identifier when an edition maps to nothing
    editions: dict[str, str]  # Edition name -> product identifier
    service_packs: dict[int, str]  # Level -> build number; level 0 is the base build
    default_language: str = "en-us"
    default_products: list[str] = Field(default_factory=list)
    components: dict[str, str] = Field(default_factory=dict)  # Component name -> installer feature id

    def build_for(self, level: int) -> str | None:
        """Return the build number for a service-pack level, or None if unknown."""
        return self.service_packs.get(level)

    @property
    def base_build(self) -> str:
        return self.service_packs[0]


class Catalog(BaseModel):
    """Root catalog loaded from catalog.json."""

    model_config = ConfigDict(frozen=True)

    versions: dict[str, VersionEntry]
    languages: dict[str, int]  # Language code -> locale identifier (LCID)

    def get_version(self, version: str) -> VersionEntry | None:
        return self.versions.get(version)

    def has_language(self, code: str) -> bool:
        return code in self.languages

    def locale_for(self, code: str) -> int | None:
        return self.languages.get(code)
