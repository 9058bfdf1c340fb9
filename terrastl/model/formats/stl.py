"""
STL encoding for terrain meshes.

Binary layout (little-endian):

    bytes 0-79    header, ASCII, zero padded
    bytes 80-83   uint32 triangle count
    then per triangle (50 bytes):
        float32[3] normal
        float32[3] v0, v1, v2
        uint16     attribute byte count (always 0)
"""

import os
import struct
import logging
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from terrastl.exceptions import STLFormatError
from terrastl.model.core.mesh import TriangleMesh
from terrastl.model.utils.validation import ensure_directory_exists

logger = logging.getLogger(__name__)

STL_HEADER_SIZE = 80
STL_COUNT_SIZE = 4
STL_PREAMBLE_SIZE = STL_HEADER_SIZE + STL_COUNT_SIZE
STL_RECORD_SIZE = 50

DEFAULT_HEADER = "Terrain model generated by terrastl"

STL_RECORD_DTYPE = np.dtype([
    ("normal", "<f4", (3,)),
    ("v0", "<f4", (3,)),
    ("v1", "<f4", (3,)),
    ("v2", "<f4", (3,)),
    ("attr", "<u2"),
])


def encode_header(text: str) -> bytes:
    """
    Encode header text into exactly 80 bytes.

    Text is ASCII encoded (unencodable characters become '?'), truncated to
    80 bytes and padded with zero bytes.
    """
    raw = text.encode("ascii", errors="replace")[:STL_HEADER_SIZE]
    return raw.ljust(STL_HEADER_SIZE, b"\0")


def expected_buffer_size(triangle_count: int) -> int:
    """Size in bytes of a binary STL holding ``triangle_count`` triangles."""
    return STL_PREAMBLE_SIZE + STL_RECORD_SIZE * triangle_count


def serialize_stl(mesh: TriangleMesh, header: str = DEFAULT_HEADER) -> bytes:
    """
    Encode a mesh as binary STL.

    The output is deterministic: equal meshes always produce equal bytes.
    Vertex and normal coordinates are rounded to float32.

    Args:
        mesh: Triangles to encode, in output order
        header: Header text

    Returns:
        Buffer of exactly 84 + 50 * mesh.triangle_count bytes
    """
    count = mesh.triangle_count

    records = np.zeros(count, dtype=STL_RECORD_DTYPE)
    records["normal"] = mesh.normals
    records["v0"] = mesh.triangles[:, 0]
    records["v1"] = mesh.triangles[:, 1]
    records["v2"] = mesh.triangles[:, 2]

    buffer = encode_header(header) + struct.pack("<I", count) + records.tobytes()

    if len(buffer) != expected_buffer_size(count):
        raise STLFormatError(
            f"Encoded {len(buffer)} bytes for {count} triangles, "
            f"expected {expected_buffer_size(count)}"
        )
    return buffer


@dataclass
class ParsedSTL:
    """Contents of a binary STL buffer."""
    header: bytes
    triangle_count: int
    normals: np.ndarray      # (N, 3) float32
    vertices: np.ndarray     # (N, 3, 3) float32
    attributes: np.ndarray   # (N,) uint16

    @property
    def header_text(self) -> str:
        return self.header.rstrip(b"\0").decode("ascii", errors="replace")

    def get_bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        """Get bounding box as (min_xyz, max_xyz)."""
        if self.triangle_count == 0:
            zeros = np.zeros(3, dtype=np.float32)
            return zeros, zeros
        points = self.vertices.reshape(-1, 3)
        return points.min(axis=0), points.max(axis=0)


def parse_stl(buffer: Union[bytes, bytearray, memoryview]) -> ParsedSTL:
    """
    Decode a binary STL buffer.

    Args:
        buffer: Raw STL bytes

    Returns:
        ParsedSTL with float32 normals and vertices

    Raises:
        STLFormatError: If the buffer is truncated or its size disagrees with
            the triangle count in the header
    """
    buffer = bytes(buffer)
    if len(buffer) < STL_PREAMBLE_SIZE:
        raise STLFormatError(
            f"Buffer of {len(buffer)} bytes is too short for an STL header"
        )

    header = buffer[:STL_HEADER_SIZE]
    (count,) = struct.unpack_from("<I", buffer, STL_HEADER_SIZE)

    if len(buffer) != expected_buffer_size(count):
        raise STLFormatError(
            f"Header declares {count} triangles ({expected_buffer_size(count)} bytes) "
            f"but buffer holds {len(buffer)} bytes"
        )

    if count:
        records = np.frombuffer(buffer, dtype=STL_RECORD_DTYPE, count=count, offset=STL_PREAMBLE_SIZE)
    else:
        records = np.zeros(0, dtype=STL_RECORD_DTYPE)
    vertices = np.stack([records["v0"], records["v1"], records["v2"]], axis=1)

    return ParsedSTL(
        header=header,
        triangle_count=count,
        normals=np.array(records["normal"]),
        vertices=vertices,
        attributes=np.array(records["attr"])
    )


def serialize_ascii_stl(mesh: TriangleMesh, solid_name: str = "terrain") -> str:
    """Encode a mesh as ASCII STL text."""
    lines = [f"solid {solid_name}"]
    for normal, v0, v1, v2 in mesh:
        lines.append(f"  facet normal {normal[0]:.6e} {normal[1]:.6e} {normal[2]:.6e}")
        lines.append("    outer loop")
        for v in (v0, v1, v2):
            lines.append(f"      vertex {v[0]:.6e} {v[1]:.6e} {v[2]:.6e}")
        lines.append("    endloop")
        lines.append("  endfacet")
    lines.append(f"endsolid {solid_name}")
    return "\n".join(lines) + "\n"


def ensure_stl_extension(filename: str) -> str:
    """Force a .stl extension onto a filename."""
    if not filename.lower().endswith('.stl'):
        filename = f"{os.path.splitext(filename)[0]}.stl"
    return filename


def write_stl(
    model: Union[TriangleMesh, bytes],
    filename: str,
    header: str = DEFAULT_HEADER,
    ascii_format: bool = False
) -> str:
    """
    Write a mesh or an already serialized buffer to disk.

    Args:
        model: TriangleMesh, or binary STL bytes from serialize_stl
        filename: Output filename (extension forced to .stl)
        header: Header text for binary output, solid name for ASCII output
        ascii_format: Write ASCII STL instead of binary (needs a TriangleMesh)

    Returns:
        Path of the written file

    Raises:
        OSError: If the file cannot be written
    """
    filename = ensure_stl_extension(str(filename))
    if not ensure_directory_exists(filename):
        raise OSError(f"Cannot create output directory for {filename}")

    if ascii_format:
        if not isinstance(model, TriangleMesh):
            raise TypeError("ASCII STL output requires a TriangleMesh")
        with open(filename, 'w') as f:
            f.write(serialize_ascii_stl(model, solid_name=header))
    else:
        data = model if isinstance(model, (bytes, bytearray)) else serialize_stl(model, header)
        with open(filename, 'wb') as f:
            f.write(data)

    logger.info(f"Exported STL file to {filename}")
    return filename
