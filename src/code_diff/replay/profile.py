"""Loading recorded profiles from JSON files."""

import json
from pathlib import Path
from typing import Any

from code_diff.errors import ProfileFormatError


def _to_address(value: Any, where: str) -> int:
    """Integer, or hex string with or without a 0x prefix."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value, 16)
        except ValueError:
            pass
    raise ProfileFormatError(f"{where}: address must be an integer or hex string, got {value!r}")


def _to_hits(value: Any, where: str) -> int:
    """Non-negative integer, or decimal string."""
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    raise ProfileFormatError(f"{where}: hits must be a non-negative integer, got {value!r}")


def parse_profile(data: Any) -> list[tuple[int, int]]:
    """Convert decoded JSON into (address, hits) samples.

    Accepted shapes:
        [[address, hits], ...]
        [{"address": ..., "hits": ...}, ...]   (hits defaults to 1)
        {"samples": [...]} wrapping either of the above
    """
    if isinstance(data, dict) and "samples" in data:
        data = data["samples"]
    if not isinstance(data, list):
        raise ProfileFormatError("Profile must be a list of samples")

    samples = []
    for i, entry in enumerate(data):
        where = f"sample {i}"
        if isinstance(entry, dict):
            if "address" not in entry:
                raise ProfileFormatError(f"{where}: missing address")
            address = _to_address(entry["address"], where)
            hits = _to_hits(entry.get("hits", 1), where)
        elif isinstance(entry, list) and len(entry) == 2:
            address = _to_address(entry[0], where)
            hits = _to_hits(entry[1], where)
        else:
            raise ProfileFormatError(f"{where}: expected [address, hits] or an object")
        samples.append((address, hits))
    return samples


def load_profile(path: Path) -> list[tuple[int, int]]:
    """Read a recorded profile file.

    Raises:
        ProfileFormatError: If the file is missing, unreadable or malformed
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ProfileFormatError(f"Profile not found: {path}")
    except json.JSONDecodeError as e:
        raise ProfileFormatError(f"Invalid JSON in {path.name}: {e}")
    except (OSError, UnicodeDecodeError) as e:
        raise ProfileFormatError(f"Cannot read profile {path}: {e}") from e
    return parse_profile(data)
