"""Shared fixtures: solution manifests and project files on disk."""

import uuid
from pathlib import Path

import pytest

CSHARP_PROJECT_GUID = "FAE04EC0-301F-11D3-BF4B-00C04F79EFBC"
SOLUTION_FOLDER_GUID = "2150E333-8FDC-42A3-9474-1A3956D46DE8"

SDK_PROJECT = """<Project Sdk="Microsoft.NET.Sdk">

  <PropertyGroup>
    <TargetFramework>net8.0</TargetFramework>
  </PropertyGroup>

  <ItemGroup>
{items}
  </ItemGroup>

</Project>
"""

LEGACY_PROJECT = """<?xml version="1.0" encoding="utf-8"?>
<Project ToolsVersion="15.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <!-- legacy project -->
  <PropertyGroup>
    <TargetFrameworkVersion>v4.8</TargetFrameworkVersion>
  </PropertyGroup>
  <ItemGroup>
    <Reference Include="System" />
    <Reference Include="Newtonsoft.Json, Version=12.0.0.0, Culture=neutral, PublicKeyToken=30ad4fe6b2a6aeed">
      <HintPath>..\\packages\\Newtonsoft.Json.12.0.3\\lib\\net45\\Newtonsoft.Json.dll</HintPath>
    </Reference>
  </ItemGroup>
  <ItemGroup>
    <PackageReference Include="Serilog">
      <Version>2.10.0</Version>
    </PackageReference>
  </ItemGroup>
</Project>
"""


def sdk_project(packages: list[tuple[str, str]]) -> str:
    """Render an SDK-style project with the given package references."""
    items = "\n".join(
        f'    <PackageReference Include="{package_id}" Version="{version}" />'
        for package_id, version in packages
    )
    return SDK_PROJECT.format(items=items)


def solution_text(projects: dict[str, str]) -> str:
    """Render a solution manifest for ``{name: relative path}``."""
    lines = [
        "",
        "Microsoft Visual Studio Solution File, Format Version 12.00",
        "# Visual Studio Version 17",
        "VisualStudioVersion = 17.0.31903.59",
        "MinimumVisualStudioVersion = 10.0.40219.1",
    ]
    for name, path in projects.items():
        guid = str(uuid.uuid4()).upper()
        lines.append(f'Project("{{{CSHARP_PROJECT_GUID}}}") = "{name}", "{path}", "{{{guid}}}"')
        lines.append("EndProject")
    lines += [
        "Global",
        "\tGlobalSection(SolutionConfigurationPlatforms) = preSolution",
        "\t\tDebug|Any CPU = Debug|Any CPU",
        "\tEndGlobalSection",
        "EndGlobal",
        "",
    ]
    return "\n".join(lines)


@pytest.fixture
def make_solution(tmp_path: Path):
    """
    Factory writing a solution with one SDK project per entry.

    ``make_solution({"App": [("Newtonsoft.Json", "13.0.1")]})`` creates
    ``App/App.csproj`` and ``Demo.sln`` referencing it with a Windows path.
    """

    def factory(projects: dict[str, list[tuple[str, str]]], name: str = "Demo") -> Path:
        entries = {}
        for project_name, packages in projects.items():
            project_dir = tmp_path / project_name
            project_dir.mkdir(parents=True, exist_ok=True)
            (project_dir / f"{project_name}.csproj").write_text(sdk_project(packages), encoding="utf-8")
            entries[project_name] = f"{project_name}\\{project_name}.csproj"

        solution_path = tmp_path / f"{name}.sln"
        solution_path.write_text(solution_text(entries), encoding="utf-8")
        return solution_path

    return factory


@pytest.fixture
def local_library(tmp_path: Path):
    """Factory creating an empty DLL file under ``tmp_path/local``."""

    def factory(relative: str) -> str:
        path = tmp_path / "local" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"MZ")
        return str(path)

    return factory
