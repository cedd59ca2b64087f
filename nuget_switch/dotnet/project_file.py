"""Read and rewrite package and file references in .csproj files."""

import os
import re
import shutil
import tempfile
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from nuget_switch.core.exceptions import InvalidArgumentError, IOFailureError, NotFoundError
from nuget_switch.utils.logging import get_logger

logger = get_logger(__name__)

_INDENT = "  "
_BOM = b"\xef\xbb\xbf"

_ROOT_START_TAG = re.compile(rb"""<(?![?!])[\w:.-]+(?:\s+[\w:.-]+\s*=\s*(?:"[^"]*"|'[^']*'))*\s*/?>""")
_ATTRIBUTE = re.compile(rb"""([\w:.-]+)\s*=\s*(?:"[^"]*"|'[^']*')""")


@dataclass(frozen=True)
class PackageRef:
    """A NuGet package dependency declared in a project file."""

    package_id: str
    version: str


class _ProjectDocument:
    """
    Parsed project file that remembers how to write itself back.

    The bytes before the root element (BOM, XML declaration, leading
    comments) and the trailing whitespace are written back unchanged, as
    are the file's line endings. Tags are held without the
    MSBuild namespace; the root carries ``xmlns`` as a plain attribute in
    its original position.
    """

    def __init__(self, path: Path):
        self.path = path

        data = path.read_bytes()
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        self.root = ET.fromstring(data, parser=parser)

        self.bom = data.startswith(_BOM)
        self.newline = b"\r\n" if b"\r\n" in data else b"\n"
        content = data.removeprefix(_BOM)
        start_tag = _ROOT_START_TAG.search(content)
        self.prolog = content[:start_tag.start()] if start_tag else b""
        self.epilogue = content[len(content.rstrip()):]

        # Legacy projects put every element in the MSBuild namespace
        if self.root.tag.startswith("{"):
            namespace = self.root.tag[1:].partition("}")[0]
            self._unqualify(namespace, start_tag.group(0) if start_tag else b"")

    def _unqualify(self, namespace: str, start_tag: bytes) -> None:
        prefix = f"{{{namespace}}}"
        for element in self.root.iter():
            if isinstance(element.tag, str):
                element.tag = element.tag.removeprefix(prefix)

        attributes = {}
        for match in _ATTRIBUTE.finditer(start_tag):
            name = match.group(1).decode("utf-8")
            if name == "xmlns":
                attributes[name] = namespace
            elif name in self.root.attrib:
                attributes[name] = self.root.attrib[name]
        attributes.setdefault("xmlns", namespace)
        for name, value in self.root.attrib.items():
            attributes.setdefault(name, value)
        self.root.attrib = attributes

    def parent_map(self) -> dict[ET.Element, ET.Element]:
        return {child: parent for parent in self.root.iter() for child in parent}

    def save(self) -> None:
        """Serialize to a temp file next to the project, then swap it in."""
        body = ET.tostring(self.root, encoding="utf-8", xml_declaration=False)
        if self.newline != b"\n":
            body = body.replace(b"\n", self.newline)
        data = (_BOM if self.bom else b"") + self.prolog + body + self.epilogue

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            dir=self.path.parent,
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            shutil.copymode(self.path, tmp_name)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def _require_path(path: str | Path) -> Path:
    if not str(path).strip():
        raise InvalidArgumentError("Project file path must not be blank", argument="path")
    return Path(path)


def _open_for_update(path: Path) -> _ProjectDocument:
    if not path.is_file():
        raise NotFoundError(f"Project file not found: {path}", path=str(path))
    return _ProjectDocument(path)


def _append_indented(parent: ET.Element, child: ET.Element, level: int) -> None:
    """Append ``child`` to ``parent`` (at nesting ``level``) keeping the file's layout."""
    child_indent = "\n" + _INDENT * (level + 1)
    if len(parent):
        last = parent[-1]
        child.tail = last.tail
        last.tail = child_indent
    else:
        parent.text = child_indent
        child.tail = "\n" + _INDENT * level
    parent.append(child)


def _detach(parent: ET.Element, child: ET.Element) -> None:
    """Remove ``child`` from ``parent`` without leaving a hole in the indentation."""
    index = list(parent).index(child)
    if index > 0:
        parent[index - 1].tail = child.tail
    elif len(parent) == 1:
        parent.text = child.tail
    parent.remove(child)


def _simple_name(include: str) -> str:
    # "Foo, Version=1.0.0.0, Culture=neutral" -> "Foo"
    return include.split(",", 1)[0].strip()


def list_package_references(path: str | Path) -> list[PackageRef]:
    """
    List the PackageReference entries of a project file.

    Discovery is lenient: a missing file yields no packages and entries
    without an id or version are skipped.

    Args:
        path: Path to the .csproj file

    Returns:
        Package references in document order

    Raises:
        IOFailureError: If the file exists but cannot be parsed
    """
    path = Path(path)
    if not path.is_file():
        logger.debug(f"Project file not found, no packages: {path}")
        return []

    try:
        document = _ProjectDocument(path)
    except (OSError, ET.ParseError) as e:
        raise IOFailureError(f"Failed to read project file {path}: {e}", path=str(path)) from e

    packages = []
    for element in document.root.iter("PackageReference"):
        package_id = element.get("Include")
        version = element.get("Version")
        if not version:
            version_element = element.find("Version")
            if version_element is not None and version_element.text:
                version = version_element.text.strip()

        if package_id and version:
            packages.append(PackageRef(package_id=package_id, version=version))

    return packages


def remove_package_reference(path: str | Path, package_id: str) -> int:
    """
    Remove every PackageReference for ``package_id`` from a project file.

    The id is matched case-insensitively. The file is only rewritten when
    something was removed.

    Args:
        path: Path to the .csproj file
        package_id: NuGet package id

    Returns:
        Number of elements removed

    Raises:
        InvalidArgumentError: If the path or package id is blank
        NotFoundError: If the project file does not exist
        IOFailureError: If the file cannot be parsed or written
    """
    path = _require_path(path)
    if not package_id or not package_id.strip():
        raise InvalidArgumentError("Package id must not be blank", argument="package_id")

    try:
        document = _open_for_update(path)
        parents = document.parent_map()
        wanted = package_id.casefold()

        matches = [
            element
            for element in document.root.iter("PackageReference")
            if (element.get("Include") or "").casefold() == wanted
        ]
        for element in matches:
            _detach(parents[element], element)

        if matches:
            document.save()
    except (OSError, ET.ParseError) as e:
        raise IOFailureError(
            f"Failed to remove package {package_id} from {path}: {e}",
            path=str(path),
        ) from e

    logger.debug(f"Removed {len(matches)} reference(s) to {package_id} from {path.name}")
    return len(matches)


def add_file_references(
    path: str | Path,
    references: Iterable[tuple[str, str]],
) -> int:
    """
    Add or update DLL references in a project file.

    A reference whose name already exists (case-insensitive, ignoring any
    version/culture qualifiers) gets its HintPath updated in place; any other
    name is appended as a new Reference marked Private (copy local).
    Blank names or hint paths are skipped with a warning.

    Args:
        path: Path to the .csproj file
        references: (reference name, hint path) pairs

    Returns:
        Number of references added or updated

    Raises:
        InvalidArgumentError: If the path is blank or no references are given
        NotFoundError: If the project file does not exist
        IOFailureError: If the file cannot be parsed or written
    """
    path = _require_path(path)
    references = list(references)
    if not references:
        raise InvalidArgumentError("No references provided", argument="references")

    applied = 0
    try:
        document = _open_for_update(path)
        root = document.root

        container = next(
            (group for group in root.iter("ItemGroup") if group.find("Reference") is not None),
            None,
        )
        if container is None:
            container = ET.Element("ItemGroup")
            _append_indented(root, container, level=0)

        existing = {}
        for element in root.iter("Reference"):
            existing.setdefault(_simple_name(element.get("Include") or "").casefold(), element)

        for reference_name, hint_path in references:
            if not reference_name or not reference_name.strip() or not hint_path or not hint_path.strip():
                logger.warning(f"Skipped invalid reference entry: '{reference_name}' - '{hint_path}'")
                continue

            element = existing.get(reference_name.casefold())
            if element is not None:
                hint = element.find("HintPath")
                if hint is None:
                    hint = ET.Element("HintPath")
                    _append_indented(element, hint, level=2)
                hint.text = hint_path
                logger.debug(f"Updated reference {reference_name} -> {hint_path}")
            else:
                element = ET.Element("Reference", {"Include": reference_name})
                ET.SubElement(element, "HintPath").text = hint_path
                ET.SubElement(element, "Private").text = "true"
                ET.indent(element, space=_INDENT, level=2)
                _append_indented(container, element, level=1)
                existing[reference_name.casefold()] = element
                logger.debug(f"Added reference {reference_name} -> {hint_path}")
            applied += 1

        document.save()
    except (OSError, ET.ParseError) as e:
        raise IOFailureError(
            f"Error updating DLL references in {path}: {e}",
            path=str(path),
        ) from e

    return applied
