"""Tests for per-generation variant resolution."""

from typing import Any

import pytest

from officepilot.exceptions import UnresolvedInstallRootError
from officepilot.models.catalog import Catalog
from officepilot.models.deployment import (
    Architecture,
    ConfigKind,
    InstallSpec,
    OfficeVersion,
    UninstallShape,
)
from officepilot.services.catalog import CatalogService
from officepilot.services.deployment import GENERATIONS, SpecValidator, VariantResolver
from officepilot.utils import get_default_catalog_file


@pytest.fixture(scope="module")
def catalog() -> Catalog:
    return CatalogService(get_default_catalog_file()).catalog


def _spec(catalog: Catalog, **overrides: Any) -> InstallSpec:
    request: dict[str, Any] = {
        "version": "2010",
        "edition": "Professional Pro",
        "service_pack": 1,
        "license_key": "ABCDE-FGHIJ-KLMNO-PQRST-UVWXY",
        "architecture": "x86",
        "products": ["Word", "Excel"],
        "language": "en-us",
        "deployment_root": r"C:\Media",
    }
    request.update(overrides)
    return SpecValidator(catalog).validate(request)


def test_every_supported_version_has_a_profile() -> None:
    assert set(GENERATIONS) == set(OfficeVersion)


def test_2010_embeds_architecture_in_root(catalog: Catalog) -> None:
    variant = VariantResolver(catalog).resolve(_spec(catalog))

    assert variant.installer_root == r"C:\Media\OFFICE14\Professional Pro\x86"
    assert variant.setup_exe == r"C:\Media\OFFICE14\Professional Pro\x86\setup.exe"
    assert variant.config_kind is ConfigKind.XML
    assert variant.uninstall_shape is UninstallShape.SETUP
    assert variant.product_id == "ProPlus"
    assert variant.config.path == r"C:\Media\OFFICE14\Professional Pro\x86\ProPlus.WW\config.xml"


def test_2010_x64_root(catalog: Catalog) -> None:
    variant = VariantResolver(catalog).resolve(_spec(catalog, architecture="x64"))
    assert variant.installer_root.endswith(r"OFFICE14\Professional Pro\x64")
    assert variant.probe.view is Architecture.X64


def test_2003_root_has_no_edition_or_architecture(catalog: Catalog) -> None:
    variant = VariantResolver(catalog).resolve(_spec(catalog, version="2003", edition="Professional"))

    assert variant.installer_root == r"C:\Media\OFFICE11"
    assert variant.config_kind is ConfigKind.INI
    assert variant.config_flag == "/settings"
    assert variant.uninstall_shape is UninstallShape.MSI
    assert variant.product_id == "{90110409-6000-11D3-8CFE-0150048383C9}"
    assert variant.config.path == r"C:\Media\OFFICE11\settings.ini"


@pytest.mark.parametrize(
    ("version", "edition", "tag"),
    [("2007", "Enterprise", "12"), ("2013", "Standard", "15")],
)
def test_edition_keyed_roots_without_architecture(catalog: Catalog, version: str, edition: str, tag: str) -> None:
    variant = VariantResolver(catalog).resolve(_spec(catalog, version=version, edition=edition, architecture="x64"))

    assert variant.installer_root == rf"C:\Media\OFFICE{tag}\{edition}"
    assert variant.config_kind is ConfigKind.XML
    assert variant.uninstall_shape is UninstallShape.SETUP


def test_unc_deployment_root(catalog: Catalog) -> None:
    variant = VariantResolver(catalog).resolve(_spec(catalog, deployment_root=r"\\fileserver\media"))
    assert variant.installer_root == r"\\fileserver\media\OFFICE14\Professional Pro\x86"


def test_builds_and_probe_key(catalog: Catalog) -> None:
    variant = VariantResolver(catalog).resolve(_spec(catalog, service_pack=2))

    assert variant.base_build == "14.0.4763.1000"
    assert variant.target_build == "14.0.7015.1000"
    assert variant.probe.path == r"SOFTWARE\Microsoft\Office\14.0\Common\ProductVersion"
    assert variant.probe.value_name == "LastProduct"


def test_language_marker_uses_locale_id(catalog: Catalog) -> None:
    variant = VariantResolver(catalog).resolve(_spec(catalog, language="fr-fr"))

    assert variant.locale_id == 1036
    assert variant.language_marker == r"%ProgramFiles(x86)%\Microsoft Office\Office14\1036"
    assert variant.language_pack_config.entries["add_language"] == "fr-fr"


def test_xml_config_content(catalog: Catalog) -> None:
    spec = _spec(catalog, auto_activate=True, company_name="Contoso", file_mode="0640")
    config = VariantResolver(catalog).resolve(spec).config

    assert config.kind is ConfigKind.XML
    assert config.entries["product"] == "ProPlus"
    assert config.entries["pidkey"] == "ABCDEFGHIJKLMNOPQRSTUVWXY"
    assert config.entries["company_name"] == "Contoso"
    assert config.entries["options"] == {"EXCELFiles": "Local", "WORDFiles": "Local"}
    assert config.entries["settings"] == {"AUTO_ACTIVATE": "1"}
    assert config.mode == "0640"


def test_ini_config_content(catalog: Catalog) -> None:
    spec = _spec(catalog, version="2003", edition="Standard", user_name="Alex")
    config = VariantResolver(catalog).resolve(spec).config

    assert config.kind is ConfigKind.INI
    assert config.entries["Options"]["PIDKEY"] == "ABCDEFGHIJKLMNOPQRSTUVWXY"
    assert config.entries["Options"]["USERNAME"] == "Alex"
    assert config.entries["Options"]["ADDLOCAL"] == "EXCELFiles,WORDFiles"
    assert config.entries["Display"]["Display"] == "None"


def test_blank_deployment_root_is_unresolved(catalog: Catalog) -> None:
    spec = _spec(catalog).model_copy(update={"deployment_root": "  "})
    with pytest.raises(UnresolvedInstallRootError):
        VariantResolver(catalog).resolve(spec)


def test_blank_edition_segment_is_unresolved(catalog: Catalog) -> None:
    spec = _spec(catalog).model_copy(update={"edition": " "})
    with pytest.raises(UnresolvedInstallRootError):
        VariantResolver(catalog).resolve(spec)
