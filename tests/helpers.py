"""Test helpers: sample dependencies, classpath table and source builders."""

from __future__ import annotations

import struct
import zipfile
from pathlib import Path

from depsentinel.models import DependencyRecord, DependencyType, Module, SourceFile

GUAVA = DependencyRecord(DependencyType.MAVEN, "com.google.guava", "guava", "33.3.1-jre")
SLF4J = DependencyRecord(DependencyType.MAVEN, "org.slf4j", "slf4j-api", "2.0.16")
COMMONS_LANG = DependencyRecord(DependencyType.MAVEN, "org.apache.commons", "commons-lang3", "3.17.0")

CLASSPATH = {
    "com.google.guava:guava:33.3.1-jre": [
        "com.google.common.collect.CompactHashSet",
        "com.google.common.collect.ImmutableList",
        "com.google.common.base.Strings",
    ],
    "org.slf4j:slf4j-api:2.0.16": [
        "org.slf4j.Logger",
        "org.slf4j.LoggerFactory",
    ],
    "org.apache.commons:commons-lang3:3.17.0": [
        "org.apache.commons.lang3.StringUtils",
    ],
}


def java(path: str, text: str) -> SourceFile:
    return SourceFile(path=path, language="java", content=text.encode("utf-8"))


def kotlin(path: str, text: str) -> SourceFile:
    return SourceFile(path=path, language="kotlin", content=text.encode("utf-8"))


def module(name: str, deps=(), sources=()) -> Module:
    return Module(name=name, path=Path(name), dependencies=tuple(deps), sources=tuple(sources))


def class_bytes(access_flags: int) -> bytes:
    """Minimal class file header: empty constant pool, then access_flags."""
    return struct.pack(">IHHHH", 0xCAFEBABE, 0, 52, 1, access_flags)


def write_jar(path: Path, entries: dict[str, bytes]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return path


def write_corrupt_jar(path: Path, name: str) -> Path:
    """Write a jar whose single deflated entry has an invalid compressed stream."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(name, class_bytes(0x0021) * 64)
    data = bytearray(path.read_bytes())
    compressed_size, name_len, extra_len = struct.unpack_from("<I4xHH", data, 18)
    start = 30 + name_len + extra_len
    # BFINAL=1, BTYPE=11 is a reserved deflate block type.
    data[start : start + compressed_size] = b"\xff" * compressed_size
    path.write_bytes(bytes(data))
    return path
