"""
Pytest configuration and shared fixtures.
"""

import random
import tempfile
from pathlib import Path

import pytest

from staff_drill.core import Letter, Pitch
from staff_drill.models import FixedSetProfile, TimingConfig
from staff_drill.profiles import ProfileLoader
from staff_drill.session import ManualScheduler

LIBRARY_PATH = Path(__file__).parent.parent / "src" / "staff_drill" / "profiles" / "library"


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def library_path() -> Path:
    """Path to the built-in profile library."""
    return LIBRARY_PATH


@pytest.fixture
def loader(temp_dir: Path) -> ProfileLoader:
    """Loader over the built-in library with an empty project directory."""
    return ProfileLoader(library_path=LIBRARY_PATH, project_path=temp_dir / "profiles")


@pytest.fixture
def grand_staff(loader: ProfileLoader):
    return loader.get_profile("grand-staff")


@pytest.fixture
def violin_range(loader: ProfileLoader):
    return loader.get_profile("violin-range")


@pytest.fixture
def violin_fingering(loader: ProfileLoader):
    return loader.get_profile("violin-fingering")


@pytest.fixture
def middle_c_only() -> FixedSetProfile:
    """A profile that always asks for C4, answered 'C'."""
    return FixedSetProfile(
        name="middle-c",
        entries=(Pitch(Letter.C, 4),),
        timing=TimingConfig(correct_delay=0.5, wrong_delay=3.0),
    )


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)
