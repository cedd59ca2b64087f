"""Tests for reading and rewriting project files."""

import xml.etree.ElementTree as ET

import pytest

from nuget_switch.core.exceptions import InvalidArgumentError, IOFailureError, NotFoundError
from nuget_switch.dotnet.project_file import (
    PackageRef,
    add_file_references,
    list_package_references,
    remove_package_reference,
)
from tests.conftest import LEGACY_PROJECT, sdk_project

BOM = b"\xef\xbb\xbf"
MSBUILD_NS = "{http://schemas.microsoft.com/developer/msbuild/2003}"


@pytest.fixture
def sdk_csproj(tmp_path):
    path = tmp_path / "App" / "App.csproj"
    path.parent.mkdir()
    path.write_text(
        sdk_project([("Newtonsoft.Json", "13.0.1"), ("Serilog", "3.1.1")]),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def legacy_csproj(tmp_path):
    path = tmp_path / "Legacy" / "Legacy.csproj"
    path.parent.mkdir()
    path.write_text(LEGACY_PROJECT, encoding="utf-8")
    return path


def _references(path, ns=""):
    root = ET.parse(path).getroot()
    return {
        element.get("Include"): element
        for element in root.iter(f"{ns}Reference")
    }


class TestListPackageReferences:
    """Lenient package discovery."""

    def test_reads_include_and_version_attributes(self, sdk_csproj):
        assert list_package_references(sdk_csproj) == [
            PackageRef("Newtonsoft.Json", "13.0.1"),
            PackageRef("Serilog", "3.1.1"),
        ]

    def test_reads_nested_version_in_namespaced_project(self, legacy_csproj):
        assert list_package_references(legacy_csproj) == [PackageRef("Serilog", "2.10.0")]

    def test_version_attribute_wins_over_element(self, tmp_path):
        path = tmp_path / "Both.csproj"
        path.write_text(
            "<Project>\n"
            "  <ItemGroup>\n"
            '    <PackageReference Include="Dapper" Version="2.1.0">\n'
            "      <Version>1.0.0</Version>\n"
            "    </PackageReference>\n"
            "  </ItemGroup>\n"
            "</Project>\n",
            encoding="utf-8",
        )

        assert list_package_references(path) == [PackageRef("Dapper", "2.1.0")]

    def test_incomplete_entries_are_skipped(self, tmp_path):
        path = tmp_path / "Incomplete.csproj"
        path.write_text(
            "<Project>\n"
            "  <ItemGroup>\n"
            '    <PackageReference Include="NoVersion" />\n'
            '    <PackageReference Version="1.0.0" />\n'
            '    <PackageReference Update="Updated" Version="1.0.0" />\n'
            '    <PackageReference Include="Kept" Version="4.0.0" />\n'
            "  </ItemGroup>\n"
            "</Project>\n",
            encoding="utf-8",
        )

        assert list_package_references(path) == [PackageRef("Kept", "4.0.0")]

    def test_missing_file_yields_empty_list(self, tmp_path):
        assert list_package_references(tmp_path / "Missing.csproj") == []

    def test_malformed_file_names_the_file(self, tmp_path):
        path = tmp_path / "Broken.csproj"
        path.write_text("<Project><ItemGroup></Project>", encoding="utf-8")

        with pytest.raises(IOFailureError) as exc_info:
            list_package_references(path)

        assert str(path) in exc_info.value.message


class TestRemovePackageReference:
    """Strict package removal."""

    def test_removed_package_is_no_longer_listed(self, sdk_csproj):
        removed = remove_package_reference(sdk_csproj, "Newtonsoft.Json")

        assert removed == 1
        assert [p.package_id for p in list_package_references(sdk_csproj)] == ["Serilog"]

    def test_match_is_case_insensitive(self, sdk_csproj):
        assert remove_package_reference(sdk_csproj, "newtonsoft.json") == 1
        assert "Newtonsoft.Json" not in sdk_csproj.read_text(encoding="utf-8")

    def test_removes_every_duplicate(self, tmp_path):
        path = tmp_path / "Dupes.csproj"
        path.write_text(
            sdk_project([("Dapper", "2.1.0")])
            .replace("</Project>", '  <ItemGroup Condition="x">\n    <PackageReference Include="Dapper" Version="2.0.0" />\n  </ItemGroup>\n</Project>'),
            encoding="utf-8",
        )

        assert remove_package_reference(path, "Dapper") == 2
        assert list_package_references(path) == []

    def test_no_match_leaves_file_untouched(self, sdk_csproj):
        before = sdk_csproj.read_bytes()

        assert remove_package_reference(sdk_csproj, "Unknown.Package") == 0
        assert sdk_csproj.read_bytes() == before

    def test_keeps_namespace_comments_and_declaration(self, legacy_csproj):
        remove_package_reference(legacy_csproj, "Serilog")
        content = legacy_csproj.read_text(encoding="utf-8")

        assert content.startswith("<?xml")
        assert 'xmlns="http://schemas.microsoft.com/developer/msbuild/2003"' in content
        assert "ns0:" not in content
        assert "<!-- legacy project -->" in content
        assert list_package_references(legacy_csproj) == []

    def test_missing_file_raises_not_found(self, tmp_path):
        with pytest.raises(NotFoundError):
            remove_package_reference(tmp_path / "Missing.csproj", "Serilog")

    def test_blank_package_id_is_rejected(self, sdk_csproj):
        with pytest.raises(InvalidArgumentError):
            remove_package_reference(sdk_csproj, "  ")

    def test_malformed_file_is_left_untouched(self, tmp_path):
        path = tmp_path / "Broken.csproj"
        path.write_text("<Project><ItemGroup>", encoding="utf-8")

        with pytest.raises(IOFailureError) as exc_info:
            remove_package_reference(path, "Serilog")

        assert str(path) in exc_info.value.message
        assert path.read_text(encoding="utf-8") == "<Project><ItemGroup>"


class TestAddFileReferences:
    """Adding and updating DLL references."""

    def test_adds_reference_with_hint_path_and_private(self, sdk_csproj):
        applied = add_file_references(sdk_csproj, [("Core", "../libs/Core.dll")])

        assert applied == 1
        reference = _references(sdk_csproj)["Core"]
        assert reference.findtext("HintPath") == "../libs/Core.dll"
        assert reference.findtext("Private") == "true"

    def test_second_call_updates_hint_path_in_place(self, sdk_csproj):
        add_file_references(sdk_csproj, [("Core", "../old/Core.dll")])
        add_file_references(sdk_csproj, [("core", "../new/Core.dll")])

        root = ET.parse(sdk_csproj).getroot()
        references = [r for r in root.iter("Reference") if r.get("Include").lower() == "core"]
        assert len(references) == 1
        assert references[0].findtext("HintPath") == "../new/Core.dll"

    def test_new_references_share_one_item_group(self, sdk_csproj):
        add_file_references(sdk_csproj, [("Core", "a/Core.dll")])
        add_file_references(sdk_csproj, [("Data", "a/Data.dll"), ("Web", "a/Web.dll")])

        root = ET.parse(sdk_csproj).getroot()
        groups = [g for g in root.iter("ItemGroup") if g.find("Reference") is not None]
        assert len(groups) == 1
        assert [r.get("Include") for r in groups[0].findall("Reference")] == ["Core", "Data", "Web"]

    def test_updates_qualified_reference_in_namespaced_project(self, legacy_csproj):
        add_file_references(legacy_csproj, [("Newtonsoft.Json", "..\\local\\Newtonsoft.Json.dll")])

        references = _references(legacy_csproj, MSBUILD_NS)
        assert len(references) == 2
        qualified = next(r for name, r in references.items() if name.startswith("Newtonsoft.Json"))
        assert qualified.findtext(f"{MSBUILD_NS}HintPath") == "..\\local\\Newtonsoft.Json.dll"
        assert "ns0:" not in legacy_csproj.read_text(encoding="utf-8")

    def test_adds_missing_hint_path_to_existing_reference(self, legacy_csproj):
        add_file_references(legacy_csproj, [("System", "lib/System.dll")])

        references = _references(legacy_csproj, MSBUILD_NS)
        assert references["System"].findtext(f"{MSBUILD_NS}HintPath") == "lib/System.dll"

    def test_new_elements_use_document_namespace(self, legacy_csproj):
        add_file_references(legacy_csproj, [("Core", "lib/Core.dll")])

        reference = _references(legacy_csproj, MSBUILD_NS)["Core"]
        assert reference.findtext(f"{MSBUILD_NS}Private") == "true"

    def test_invalid_pairs_are_skipped(self, sdk_csproj, caplog):
        applied = add_file_references(sdk_csproj, [("", "a/x.dll"), ("NoPath", " "), ("Core", "a/Core.dll")])

        assert applied == 1
        assert list(_references(sdk_csproj)) == ["Core"]
        assert "Skipped invalid reference entry" in caplog.text

    def test_empty_reference_list_is_rejected(self, sdk_csproj):
        with pytest.raises(InvalidArgumentError):
            add_file_references(sdk_csproj, [])

    def test_missing_file_raises_not_found(self, tmp_path):
        with pytest.raises(NotFoundError):
            add_file_references(tmp_path / "Missing.csproj", [("Core", "Core.dll")])

    def test_malformed_file_names_the_file(self, tmp_path):
        path = tmp_path / "Broken.csproj"
        path.write_text("not xml", encoding="utf-8")

        with pytest.raises(IOFailureError) as exc_info:
            add_file_references(path, [("Core", "Core.dll")])

        assert str(path) in exc_info.value.message
        assert path.read_text(encoding="utf-8") == "not xml"

    def test_no_temp_files_left_behind(self, sdk_csproj):
        add_file_references(sdk_csproj, [("Core", "a/Core.dll")])

        assert [p.name for p in sdk_csproj.parent.iterdir()] == ["App.csproj"]


class TestFileFormat:
    """Rewrites touch only the edited elements."""

    SERILOG_ITEM = (
        '    <PackageReference Include="Serilog">\n'
        "      <Version>2.10.0</Version>\n"
        "    </PackageReference>\n"
    )

    def test_remove_changes_only_the_removed_element(self, legacy_csproj):
        remove_package_reference(legacy_csproj, "Serilog")

        expected = LEGACY_PROJECT.replace(self.SERILOG_ITEM, "")
        assert legacy_csproj.read_text(encoding="utf-8") == expected

    def test_bom_and_crlf_survive_remove_and_add(self, tmp_path):
        path = tmp_path / "Windows.csproj"
        path.write_bytes(BOM + LEGACY_PROJECT.replace("\n", "\r\n").encode("utf-8"))

        remove_package_reference(path, "serilog")

        expected = LEGACY_PROJECT.replace(self.SERILOG_ITEM, "").replace("\n", "\r\n")
        assert path.read_bytes() == BOM + expected.encode("utf-8")

        add_file_references(path, [("Serilog", "..\\lib\\Serilog.dll")])

        content = path.read_bytes()
        assert content.startswith(BOM + b'<?xml version="1.0" encoding="utf-8"?>\r\n')
        assert b'<Project ToolsVersion="15.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">' in content
        assert content.count(b"\n") == content.count(b"\r\n")
        assert b"<HintPath>..\\lib\\Serilog.dll</HintPath>" in content
        assert list(_references(path, MSBUILD_NS)) == [
            "System",
            "Newtonsoft.Json, Version=12.0.0.0, Culture=neutral, PublicKeyToken=30ad4fe6b2a6aeed",
            "Serilog",
        ]

    def test_file_without_declaration_gets_none(self, sdk_csproj):
        remove_package_reference(sdk_csproj, "Serilog")

        assert sdk_csproj.read_text(encoding="utf-8").startswith('<Project Sdk="Microsoft.NET.Sdk">\n')
