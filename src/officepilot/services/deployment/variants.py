"""Per-generation variant resolution.

Everything that differs between Office generations (media layout, config file
format, uninstall command) lives in the ``GENERATIONS`` table. The resolver
selects one profile per request and never branches on the version elsewhere.
"""

from dataclasses import dataclass
from pathlib import PureWindowsPath
from typing import Any

from officepilot.exceptions import ResourceNotFoundError, UnresolvedInstallRootError
from officepilot.logger import get_logger
from officepilot.models.catalog import Catalog, VersionEntry
from officepilot.models.deployment import (
    Architecture,
    ConfigFileContent,
    ConfigKind,
    InstallSpec,
    OfficeVersion,
    RegistryProbeKey,
    ResolvedVariant,
    UninstallShape,
)

logger = get_logger(__name__)

PROBE_KEY_TEMPLATE = r"SOFTWARE\Microsoft\Office\{tag}.0\Common\ProductVersion"
PROBE_VALUE_NAME = "LastProduct"

# Where Office keeps per-language resources once a language pack is installed
PROGRAM_FILES = {
    Architecture.X86: "%ProgramFiles(x86)%",
    Architecture.X64: "%ProgramFiles%",
}


@dataclass(frozen=True)
class GenerationProfile:
    """The handful of values that differ between Office generations."""

    path_segments: tuple[str, ...]  # Formatted with tag, edition, arch
    config_kind: ConfigKind
    config_flag: str
    config_file: str  # Relative to the installer root, formatted with setup_id
    language_pack_config_file: str  # Formatted with setup_id, language
    uninstall_shape: UninstallShape


GENERATIONS: dict[OfficeVersion, GenerationProfile] = {
    OfficeVersion.V2003: GenerationProfile(
        path_segments=("OFFICE{tag}",),
        config_kind=ConfigKind.INI,
        config_flag="/settings",
        config_file="settings.ini",
        language_pack_config_file="settings.{language}.ini",
        uninstall_shape=UninstallShape.MSI,
    ),
    OfficeVersion.V2007: GenerationProfile(
        path_segments=("OFFICE{tag}", "{edition}"),
        config_kind=ConfigKind.XML,
        config_flag="/config",
        config_file="{setup_id}.WW\\config.xml",
        language_pack_config_file="{setup_id}.WW\\config.{language}.xml",
        uninstall_shape=UninstallShape.SETUP,
    ),
    OfficeVersion.V2010: GenerationProfile(
        path_segments=("OFFICE{tag}", "{edition}", "{arch}"),
        config_kind=ConfigKind.XML,
        config_flag="/config",
        config_file="{setup_id}.WW\\config.xml",
        language_pack_config_file="{setup_id}.WW\\config.{language}.xml",
        uninstall_shape=UninstallShape.SETUP,
    ),
    OfficeVersion.V2013: GenerationProfile(
        path_segments=("OFFICE{tag}", "{edition}"),
        config_kind=ConfigKind.XML,
        config_flag="/config",
        config_file="{setup_id}.WW\\config.xml",
        language_pack_config_file="{setup_id}.WW\\config.{language}.xml",
        uninstall_shape=UninstallShape.SETUP,
    ),
}


class VariantResolver:
    """Derives the concrete installer parameters for an InstallSpec."""

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def resolve(self, spec: InstallSpec) -> ResolvedVariant:
        """
        Resolve a validated spec into a concrete variant.

        Args:
            spec: Validated install spec

        Returns:
            Resolved variant

        Raises:
            UnresolvedInstallRootError: If the installer root would be empty
            ResourceNotFoundError: If the catalog lacks the version or a build/locale
        """
        entry = self.catalog.get_version(spec.version.value)
        if entry is None:
            raise ResourceNotFoundError("catalog.version_not_found", version=spec.version.value)

        profile = GENERATIONS[spec.version]
        base_build = entry.build_for(0)
        target_build = entry.build_for(spec.service_pack)
        locale_id = self.catalog.locale_for(spec.language)
        if base_build is None or target_build is None or locale_id is None:
            raise ResourceNotFoundError("catalog.version_not_found", version=spec.version.value)

        installer_root = self._installer_root(spec, entry, profile)
        config_path = str(installer_root / profile.config_file.format(setup_id=spec.setup_id))
        language_pack_config_path = str(
            installer_root / profile.language_pack_config_file.format(setup_id=spec.setup_id, language=spec.language)
        )

        variant = ResolvedVariant(
            version=spec.version,
            version_tag=entry.version_tag,
            installer_root=str(installer_root),
            setup_exe=str(installer_root / "setup.exe"),
            product_id=spec.setup_id,
            probe=RegistryProbeKey(
                path=PROBE_KEY_TEMPLATE.format(tag=entry.version_tag),
                value_name=PROBE_VALUE_NAME,
                view=spec.architecture,
            ),
            base_build=base_build,
            target_build=target_build,
            locale_id=locale_id,
            default_language=entry.default_language,
            config_kind=profile.config_kind,
            config_flag=profile.config_flag,
            uninstall_shape=profile.uninstall_shape,
            config=self._config_content(spec, entry, profile, config_path, locale_id),
            language_pack_config=self._language_pack_content(spec, profile, language_pack_config_path, locale_id),
            language_marker=(
                f"{PROGRAM_FILES[spec.architecture]}\\Microsoft Office\\Office{entry.version_tag}\\{locale_id}"
            ),
        )

        logger.info(
            "Resolved variant",
            version=spec.version.value,
            edition=spec.edition,
            installer_root=variant.installer_root,
            config_kind=variant.config_kind.value,
            uninstall_shape=variant.uninstall_shape.value,
        )
        return variant

    def _installer_root(self, spec: InstallSpec, entry: VersionEntry, profile: GenerationProfile) -> PureWindowsPath:
        root = spec.deployment_root.strip()
        if not root:
            raise UnresolvedInstallRootError(spec.version.value, "deployment root is empty")

        segments = []
        for template in profile.path_segments:
            segment = template.format(tag=entry.version_tag, edition=spec.edition, arch=spec.architecture.value).strip()
            if not segment:
                raise UnresolvedInstallRootError(spec.version.value, f"path segment '{template}' resolved to nothing")
            segments.append(segment)

        installer_root = PureWindowsPath(root, *segments)
        if not str(installer_root).strip():
            raise UnresolvedInstallRootError(spec.version.value, "installer root resolved to nothing")
        return installer_root

    def _config_content(
        self,
        spec: InstallSpec,
        entry: VersionEntry,
        profile: GenerationProfile,
        path: str,
        locale_id: int,
    ) -> ConfigFileContent:
        features = [entry.components[p] for p in sorted(spec.products) if p in entry.components]
        pidkey = spec.license_key.replace("-", "") if spec.license_key else None
        overrides = spec.overrides

        entries: dict[str, Any]
        if profile.config_kind is ConfigKind.INI:
            options: dict[str, str] = {"ADDLOCAL": ",".join(features), "LCID": str(locale_id)}
            if pidkey:
                options["PIDKEY"] = pidkey
            if overrides.company_name:
                options["COMPANYNAME"] = overrides.company_name
            if overrides.user_name:
                options["USERNAME"] = overrides.user_name
            entries = {
                "Options": options,
                "Display": {"Display": "None", "CompletionNotice": "No"},
            }
        else:
            entries = {
                "product": spec.setup_id,
                "display": {
                    "Level": "none",
                    "CompletionNotice": "no",
                    "SuppressModal": "yes",
                    "AcceptEula": "yes",
                },
                "pidkey": pidkey,
                "company_name": overrides.company_name,
                "user_name": overrides.user_name,
                "options": {feature: "Local" for feature in features},
                "add_language": spec.language,
                "settings": {"AUTO_ACTIVATE": "1" if spec.auto_activate else "0"},
            }

        return ConfigFileContent(
            kind=profile.config_kind,
            path=path,
            entries=entries,
            owner=overrides.file_owner,
            group=overrides.file_group,
            mode=overrides.file_mode,
        )

    def _language_pack_content(
        self,
        spec: InstallSpec,
        profile: GenerationProfile,
        path: str,
        locale_id: int,
    ) -> ConfigFileContent:
        entries: dict[str, Any]
        if profile.config_kind is ConfigKind.INI:
            entries = {
                "Options": {"LCID": str(locale_id), "ADDLANGUAGE": str(locale_id)},
                "Display": {"Display": "None", "CompletionNotice": "No"},
            }
        else:
            entries = {
                "product": spec.setup_id,
                "display": {"Level": "none", "CompletionNotice": "no", "SuppressModal": "yes", "AcceptEula": "yes"},
                "add_language": spec.language,
            }
        return ConfigFileContent(
            kind=profile.config_kind,
            path=path,
            entries=entries,
            owner=spec.overrides.file_owner,
            group=spec.overrides.file_group,
            mode=spec.overrides.file_mode,
        )
