"""
Profile loader - discovers and loads drill profiles.

Profiles can come from:
1. Built-in library (shipped with package)
2. Project profiles (user's project/profiles directory)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from staff_drill.constants import Clef, SamplingMode
from staff_drill.core.layout import COMPACT_LAYOUT, LARGE_LAYOUT, LayoutConfig
from staff_drill.core.pitch import Letter, Pitch
from staff_drill.models.profile import (
    FixedSetProfile,
    ProfileError,
    ProfileMetadata,
    RegisterProfile,
    TimingConfig,
)

logger = logging.getLogger(__name__)

Profile = RegisterProfile | FixedSetProfile

LAYOUT_PRESETS: dict[str, LayoutConfig] = {
    "compact": COMPACT_LAYOUT,
    "large": LARGE_LAYOUT,
}


class ProfileLoader:
    """
    Discovers and loads profile definitions.

    Profiles are loaded from YAML files in the library and project directories.
    Project profiles override library profiles with the same name.
    """

    def __init__(
        self,
        library_path: Path | None = None,
        project_path: Path | None = None,
    ):
        """
        Initialize the profile loader.

        Args:
            library_path: Path to built-in profile library
            project_path: Path to project profiles directory
        """
        self.library_path = library_path or (Path(__file__).parent / "library")
        self.project_path = project_path
        self._cache: dict[str, Profile] = {}

    def list_profiles(self) -> list[ProfileMetadata]:
        """
        List all available profiles.

        Returns profiles from both library and project, with project
        profiles taking precedence.
        """
        profiles: dict[str, ProfileMetadata] = {}

        # Load library profiles
        if self.library_path.exists():
            for path in sorted(self.library_path.glob("*.yaml")):
                profile = self._load_profile_file(path)
                if profile:
                    profiles[profile.name] = ProfileMetadata.from_profile(profile)

        # Load project profiles (override library)
        if self.project_path and self.project_path.exists():
            for path in sorted(self.project_path.glob("*.yaml")):
                profile = self._load_profile_file(path)
                if profile:
                    profiles[profile.name] = ProfileMetadata.from_profile(profile)

        return list(profiles.values())

    def get_profile(self, name: str) -> Profile | None:
        """
        Get a profile by name.

        Project profiles take precedence over library profiles.

        Args:
            name: Profile name

        Returns:
            Profile if found, None otherwise
        """
        # Check cache
        if name in self._cache:
            return self._cache[name]

        candidates: list[Path] = []
        if self.project_path:
            candidates.append(self.project_path / f"{name}.yaml")
        candidates.append(self.library_path / f"{name}.yaml")

        for path in candidates:
            if path.exists():
                profile = self._load_profile_file(path)
                if profile:
                    self._cache[name] = profile
                    return profile

        return None

    def copy_to_project(self, name: str) -> Path | None:
        """
        Copy a library profile to the project for customization.

        Args:
            name: Profile name

        Returns:
            Path to copied file, or None if not found
        """
        if not self.project_path:
            raise ValueError("No project path configured")

        # Find in library
        library_file = self.library_path / f"{name}.yaml"
        if not library_file.exists():
            return None

        # Create project profiles directory
        self.project_path.mkdir(parents=True, exist_ok=True)

        dest_file = self.project_path / f"{name}.yaml"
        if dest_file.exists():
            raise ValueError(f"Profile already exists in project: {name}")

        dest_file.write_text(library_file.read_text())

        # Invalidate cache
        self._cache.pop(name, None)

        return dest_file

    def _load_profile_file(self, path: Path) -> Profile | None:
        """Load a profile from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)

            return parse_profile(data)
        except Exception:
            logger.warning("Skipping unreadable profile file %s", path, exc_info=True)
            return None

    def clear_cache(self) -> None:
        """Clear the profile cache."""
        self._cache.clear()


def parse_profile(data: dict[str, Any]) -> Profile:
    """
    Build a profile from YAML data.

    Args:
        data: Parsed YAML mapping

    Returns:
        RegisterProfile or FixedSetProfile, depending on 'kind'
    """
    if not isinstance(data, dict):
        raise ProfileError("Profile data must be a mapping")

    kind = data.get("kind", "register")
    common: dict[str, Any] = {
        "name": data.get("name", "unknown"),
        "description": data.get("description", ""),
        "max_input_length": data.get("max_input_length", 1),
        "auto_advance": data.get("auto_advance", True),
        "timing": TimingConfig(**data.get("timing", {})),
        "layout": _parse_layout(data.get("layout", "compact")),
    }

    if kind == "register":
        return RegisterProfile(
            **common,
            sampling=SamplingMode(data.get("sampling", SamplingMode.BY_PITCH.value)),
            registers=_parse_registers(data.get("registers", {})),
        )
    if kind == "fixed":
        return FixedSetProfile(
            **common,
            entries=tuple(_parse_entry(entry) for entry in data.get("entries", [])),
        )

    raise ProfileError(f"Unknown profile kind: {kind}")


def _parse_registers(data: dict[str, Any]) -> dict[Clef, dict[int, tuple[Letter, ...]]]:
    """Parse clef -> octave -> letters; 'all' means every letter."""
    registers: dict[Clef, dict[int, tuple[Letter, ...]]] = {}
    for clef_name, bands in data.items():
        clef = Clef(clef_name)
        registers[clef] = {}
        for octave, letters in (bands or {}).items():
            if letters == "all":
                registers[clef][int(octave)] = tuple(Letter)
            else:
                registers[clef][int(octave)] = tuple(Letter.parse(str(n)) for n in letters or [])
    return registers


def _parse_entry(data: dict[str, Any]) -> Pitch:
    """Parse one fixed-set entry like {pitch: G3, label: G1}."""
    return Pitch.parse(
        str(data["pitch"]),
        clef=data.get("clef", Clef.TREBLE.value),
        display_label=str(data.get("label", "")),
    )


def _parse_layout(data: str | dict[str, Any]) -> LayoutConfig:
    """
    Parse a layout preset name, or a mapping of overrides on a preset.

    Example:
        layout:
          preset: large
          stem_down_octave: {treble: 6}
    """
    if isinstance(data, str):
        if data not in LAYOUT_PRESETS:
            raise ProfileError(f"Unknown layout preset: {data}")
        return LAYOUT_PRESETS[data]

    preset = data.get("preset", "compact")
    if preset not in LAYOUT_PRESETS:
        raise ProfileError(f"Unknown layout preset: {preset}")
    base = LAYOUT_PRESETS[preset]
    stem_down = data.get("stem_down_octave")
    bottom_reference = data.get("bottom_reference")

    return LayoutConfig(
        line_gap=float(data.get("line_gap", base.line_gap)),
        staff_top=float(data.get("staff_top", base.staff_top)),
        width=float(data.get("width", base.width)),
        height=float(data.get("height", base.height)),
        stem_length=float(data.get("stem_length", base.stem_length)),
        line_count=int(data.get("line_count", base.line_count)),
        bottom_reference=(
            {Clef(c): Pitch.parse(str(p), clef=c) for c, p in bottom_reference.items()}
            if bottom_reference
            else dict(base.bottom_reference)
        ),
        stem_down_octave=(
            {Clef(c): int(o) for c, o in stem_down.items()}
            if stem_down is not None
            else dict(base.stem_down_octave)
        ),
    )
