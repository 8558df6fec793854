"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of zgame_analyzers modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("zgame_analyzers"):
        del sys.modules[module_name]

from zgame_analyzers.parsing import CSharpParser, SyntaxTree  # noqa: E402


@pytest.fixture
def parser() -> CSharpParser:
    return CSharpParser()


@pytest.fixture
def parse_source(parser: CSharpParser) -> Callable[..., SyntaxTree]:
    """Parse C# text as if it lived at ``path``."""

    def _parse(source: str, path: str = "Assets/Scripts/Player.cs") -> SyntaxTree:
        return parser.parse(path, source.encode("utf-8"))

    return _parse


@pytest.fixture
def unity_project(tmp_path: Path) -> Path:
    """An empty Unity project layout (Assets/ + ProjectSettings/)."""
    (tmp_path / "Assets" / "Scripts").mkdir(parents=True)
    (tmp_path / "ProjectSettings").mkdir()
    return tmp_path
