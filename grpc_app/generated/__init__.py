"""Python stubs compiled from `grpc_app/protos`.

The stubs are produced with grpcio-tools the first time this package is
imported (or whenever a .proto is newer than its stub), so
`grpc_app.generated.bookie.v1.bookie_pb2` is importable without a separate
build step. Run `python -m grpc_app.generated` to force a rebuild.

Stubs are written next to this file when the install is writable. Otherwise
(e.g. a wheel in a read-only site-packages) they go to `BOOKIE_STUBS_DIR`,
defaulting to `$XDG_CACHE_HOME/bookie/stubs`, and that directory is appended
to this package's `__path__`.
"""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

import grpc_tools
from grpc_tools import protoc


PACKAGE_DIR = Path(__file__).resolve().parent
PROTO_ROOT = PACKAGE_DIR.parent / "protos"
PACKAGE = __name__

# protoc emits absolute imports rooted at the proto path, e.g. `from bookie.v1 import bookie_pb2`
_IMPORT_RE = re.compile(r"^from (bookie(?:\.\w+)*) import (\w+_pb2)", re.MULTILINE)


def output_dir() -> Path:
    """Where stubs are written: the package itself if writable, else a user cache dir."""
    if os.access(PACKAGE_DIR, os.W_OK):
        return PACKAGE_DIR
    override = os.environ.get("BOOKIE_STUBS_DIR")
    if override:
        return Path(override)
    cache_home = os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache"
    return Path(cache_home) / "bookie" / "stubs"


def _stale(proto: Path, out_dir: Path) -> bool:
    rel = proto.relative_to(PROTO_ROOT).with_suffix("")
    outputs = [
        out_dir / rel.parent / f"{rel.name}_pb2.py",
        out_dir / rel.parent / f"{rel.name}_pb2_grpc.py",
    ]
    mtime = proto.stat().st_mtime
    return any(not out.exists() or out.stat().st_mtime < mtime for out in outputs)


def _fix_imports(path: Path) -> None:
    source = path.read_text(encoding="utf-8")
    fixed = _IMPORT_RE.sub(rf"from {PACKAGE}.\1 import \2", source)
    if fixed != source:
        path.write_text(fixed, encoding="utf-8")


def build(force: bool = False, out_dir: Optional[Path] = None) -> None:
    """Compile every .proto under PROTO_ROOT into `out_dir` (default: OUT_DIR)."""
    out_dir = Path(out_dir) if out_dir is not None else OUT_DIR
    well_known = os.path.join(os.path.dirname(grpc_tools.__file__), "_proto")
    for proto in sorted(PROTO_ROOT.rglob("*.proto")):
        if not force and not _stale(proto, out_dir):
            continue
        rel = proto.relative_to(PROTO_ROOT)
        out_dir.mkdir(parents=True, exist_ok=True)
        args = [
            "grpc_tools.protoc",
            f"-I{PROTO_ROOT}",
            f"-I{well_known}",
            f"--python_out={out_dir}",
            f"--pyi_out={out_dir}",
            f"--grpc_python_out={out_dir}",
            str(proto),
        ]
        if protoc.main(args) != 0:
            raise RuntimeError(f"protoc failed for {rel}")
        # Subpackages (bookie/, bookie/v1/) only exist once compiled
        for parent in [rel.parent, *rel.parent.parents]:
            if parent == Path("."):
                continue
            init = out_dir / parent / "__init__.py"
            if not init.exists():
                init.touch()
        stem = rel.with_suffix("").name
        _fix_imports(out_dir / rel.parent / f"{stem}_pb2_grpc.py")
        _fix_imports(out_dir / rel.parent / f"{stem}_pb2.py")


OUT_DIR = output_dir()
if OUT_DIR != PACKAGE_DIR:
    __path__.append(str(OUT_DIR))

build()
