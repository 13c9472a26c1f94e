"""Khronos registry loading.

Reads a registry in the Khronos XML format (the format of egl.xml/gl.xml)
and selects the enums and commands that make up one API version and profile.

Selection rules:
    - A <feature> contributes when its api matches and its number is not
      above the requested version
    - <require> blocks add items, <remove> blocks take them away; either can
      be limited to a profile with the profile attribute
    - Extensions are only included when requested by name
    - Items keep registry order, so output built from a Registry is stable
"""

import enum
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from ..errors import PrebuildError

REGISTRY_DIR = Path(__file__).parent / "api"

_CAST_RE = re.compile(r"^EGL_CAST\(\s*(\w+)\s*,\s*(-?\w+)\s*\)$")


class RegistryError(PrebuildError):
    """Raised when a registry file is missing or inconsistent."""

    pass


class Api(enum.Enum):
    EGL = "egl"

    @property
    def registry_file(self) -> Path:
        return REGISTRY_DIR / f"{self.value}.xml"


class Profile(enum.Enum):
    CORE = "core"
    COMPATIBILITY = "compatibility"


class Fallbacks(enum.Enum):
    """Whether generated functions list alias names to fall back on."""

    ALL = "all"
    NONE = "none"


@dataclass(frozen=True)
class EnumValue:
    """A registry constant.

    Attributes:
        name: Full name, e.g. EGL_ALPHA_SIZE
        value: Literal value as written in the registry (cast removed)
        cast: Type the value is cast to (EGL_CAST(EGLContext,0)), if any
        suffix: Registry type suffix (e.g. 'ull'), if any
    """

    name: str
    value: str
    cast: Optional[str] = None
    suffix: Optional[str] = None


@dataclass(frozen=True)
class CType:
    """A C type as spelled in the registry, split into its parts."""

    base: str
    pointers: int = 0
    is_const: bool = False
    is_registry_type: bool = True


@dataclass(frozen=True)
class Param:
    name: str
    ctype: CType


@dataclass(frozen=True)
class Command:
    name: str
    return_type: CType
    params: Tuple[Param, ...]
    aliases: Tuple[str, ...] = ()


@dataclass
class Registry:
    """The selected subset of a Khronos registry.

    Example usage:
        registry = Registry(Api.EGL, (1, 5), Profile.CORE, Fallbacks.ALL, [])
        registry.write_bindings(StaticStructGenerator(), stream)
    """

    api: Api
    version: Tuple[int, int]
    profile: Profile
    fallbacks: Fallbacks
    extensions: Sequence[str] = ()
    source: Optional[Path] = None
    enums: List[EnumValue] = field(init=False, default_factory=list)
    commands: List[Command] = field(init=False, default_factory=list)

    def __post_init__(self):
        self.extensions = tuple(self.extensions)
        path = self.source if self.source is not None else self.api.registry_file
        try:
            root = ET.parse(path).getroot()
        except (OSError, ET.ParseError) as e:
            raise RegistryError(f"Failed to load registry {path}: {e}") from e

        all_enums = _load_enums(root)
        all_commands = _load_commands(root)
        enum_names, command_names = self._select(root)

        for name in enum_names:
            if name not in all_enums:
                raise RegistryError(f"Registry requires undefined enum {name}")
            self.enums.append(all_enums[name])
        for name in command_names:
            if name not in all_commands:
                raise RegistryError(f"Registry requires undefined command {name}")
            self.commands.append(all_commands[name])

    def _select(self, root: ET.Element) -> Tuple[List[str], List[str]]:
        enum_names: Dict[str, None] = {}
        command_names: Dict[str, None] = {}

        for feature in root.findall("feature"):
            if feature.get("api") != self.api.value:
                continue
            if _parse_version(feature.get("number", "0")) > self.version:
                continue
            self._apply(feature, enum_names, command_names)

        known_extensions = set()
        for extension in root.findall("extensions/extension"):
            name = extension.get("name")
            known_extensions.add(name)
            if name in self.extensions:
                self._apply(extension, enum_names, command_names)

        missing = [name for name in self.extensions if name not in known_extensions]
        if missing:
            raise RegistryError(f"Unknown extensions requested: {', '.join(missing)}")

        return list(enum_names), list(command_names)

    def _apply(
        self,
        element: ET.Element,
        enum_names: Dict[str, None],
        command_names: Dict[str, None],
    ) -> None:
        for block in element:
            if block.tag not in ("require", "remove"):
                continue
            block_profile = block.get("profile")
            if block_profile and block_profile != self.profile.value:
                continue
            for item in block:
                if item.tag not in ("enum", "command"):
                    continue
                names = enum_names if item.tag == "enum" else command_names
                if block.tag == "require":
                    names.setdefault(item.get("name"), None)
                else:
                    names.pop(item.get("name"), None)

    def write_bindings(self, generator, dest) -> None:
        """Write bindings for this registry with the given generator.

        Args:
            generator: Object with a write(registry, dest) method
            dest: Text stream to write to
        """
        generator.write(self, dest)


def _parse_version(number: str) -> Tuple[int, int]:
    major, _, minor = number.partition(".")
    return int(major), int(minor or 0)


def _load_enums(root: ET.Element) -> Dict[str, EnumValue]:
    enums = {}
    for block in root.findall("enums"):
        for val in block.findall("enum"):
            raw = val.get("value", "")
            cast = None
            match = _CAST_RE.match(raw)
            if match:
                cast, raw = match.group(1), match.group(2)
            enums[val.get("name")] = EnumValue(
                name=val.get("name"),
                value=raw,
                cast=cast,
                suffix=val.get("type"),
            )
    return enums


def _load_commands(root: ET.Element) -> Dict[str, Command]:
    commands = {}
    for cmd in root.findall("commands/command"):
        proto = cmd.find("proto")
        if proto is None:
            raise RegistryError("Command without <proto> in registry")
        name = proto.findtext("name")
        params = tuple(
            Param(name=p.findtext("name"), ctype=_parse_ctype(p)) for p in cmd.findall("param")
        )
        aliases = tuple(a.get("name") for a in cmd.findall("alias"))
        commands[name] = Command(name, _parse_ctype(proto), params, aliases)
    return commands


def _parse_ctype(element: ET.Element) -> CType:
    """Split `const <ptype>EGLint</ptype> *<name>x</name>` into a CType."""
    parts: List[str] = [element.text or ""]
    ptype = None
    for child in element:
        if child.tag == "ptype":
            ptype = child.text
            parts.append(child.tail or "")
        elif child.tag == "name":
            break
        else:
            parts.append((child.text or "") + (child.tail or ""))
    spelling = " ".join(parts)

    pointers = spelling.count("*")
    words = _words(spelling.replace("*", " "))
    is_const = "const" in words

    if ptype is not None:
        return CType(ptype, pointers, is_const, True)

    bare = [w for w in words if w != "const"]
    if not bare:
        raise RegistryError(f"Cannot determine type of {ET.tostring(element, encoding='unicode')}")
    return CType(bare[-1], pointers, is_const, False)


def _words(text: str) -> List[str]:
    return [w for w in text.split() if w]
