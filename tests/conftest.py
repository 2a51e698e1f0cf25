import sys
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


def pytest_configure() -> None:
    # Ensure `import techmap...` works without installing the package.
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def make_criteria():
    """Build a criteria map from (id, num) pairs; success criteria by default."""
    from techmap.domain.enums import NodeType
    from techmap.domain.models import Criterion

    def _make(*pairs: tuple[str, str], node_type: NodeType = NodeType.success_criterion):
        return {cid: Criterion(id=cid, name=cid, num=num, type=node_type) for cid, num in pairs}

    return _make
