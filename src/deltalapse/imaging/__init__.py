"""
Imaging Module
==============

PNG file codec for packed-pixel frames.

This is the boundary between files on disk and the numpy arrays the delta
engine works on:
    - read_frame / write_frame: file <-> Frame
    - probe_dimensions: (width, height) of a file
    - copy_frame_file: verbatim copy for anchor frames
    - pack_bgra / unpack_to_bgra: channel layout conversion
"""

from deltalapse.imaging.codec import (
    DEFAULT_PNG_COMPRESSION,
    copy_frame_file,
    pack_bgra,
    probe_dimensions,
    read_frame,
    read_frame_checked,
    unpack_to_bgra,
    write_frame,
)

__all__ = [
    "DEFAULT_PNG_COMPRESSION",
    "read_frame",
    "read_frame_checked",
    "write_frame",
    "probe_dimensions",
    "copy_frame_file",
    "pack_bgra",
    "unpack_to_bgra",
]
