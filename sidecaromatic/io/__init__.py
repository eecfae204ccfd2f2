"""Readers and in-place editors for JSON sidecars."""

from .sidecar import load_sidecar, read_field, write_list_field, write_scalar_field

__all__ = ["load_sidecar", "read_field", "write_list_field", "write_scalar_field"]
