import os, sys
import warnings
from pathlib import Path
from typing import Dict, List

import pytest

# Add src/ to sys.path for imports without an editable install
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

# Ensure required environment variables for config validation
os.environ.setdefault("DISCORD_API_TOKEN", "test-token")
os.environ.setdefault("FLIST_ACCOUNT", "test-account")
os.environ.setdefault("FLIST_PASSWORD", "test-password")
os.environ.setdefault("ADMIN_IDS", "1")

# Silence deprecation warnings surfaced from third-party dependencies during tests
warnings.filterwarnings(
    "ignore", category=DeprecationWarning, module=r"^discord\\.player$"
)
warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)

from flist_bot.commands import REGISTRY
from flist_bot.commands.context import Services
from flist_bot.commands.dispatcher import Dispatcher
from flist_bot.errors import UpstreamError
from flist_bot.kinks import Catalog, PreferenceCatalog, Profile
from flist_bot.roles import RoleStore

ADMIN_ID = 1
USER_ID = 2

RAW_KINKS = {
    "1": {
        "group": "Bondage &amp; Restraint",
        "items": [
            {"kink_id": 42, "name": "Bondage", "description": "Tying &quot;up&quot; a partner."},
            {"kink_id": 43, "name": "Rope", "description": "Shibari &amp; other rope work."},
        ],
    },
    "2": {
        "group": "Impact",
        "items": [
            {"kink_id": 50, "name": "Spanking", "description": "Open hand &lt;3"},
            {"kink_id": 51, "name": "Caning", "description": ""},
        ],
    },
}


class MemoryStorage:
    """Dict-backed stand-in for JsonFileStorage."""

    def __init__(self, data: Dict[str, object] | None = None) -> None:
        self.data = dict(data or {})
        self.saves: List[str] = []
        self.fail = False

    def load(self, name):
        return self.data.get(name)

    def save(self, name, obj):
        if self.fail:
            raise OSError("disk full")
        self.saves.append(name)
        self.data[name] = obj


class FakeScope:
    """Guild stand-in that records role changes."""

    def __init__(self, roles: Dict[str, str] | None = None, members=(ADMIN_ID, USER_ID, 3)) -> None:
        self.id = 100
        self.roles = dict(roles or {})
        self.members = set(members)
        self.granted: Dict[int, List[str]] = {}
        self.revoked: Dict[int, List[str]] = {}
        self.purged: List[int] = []

    def role_name(self, role_id):
        return self.roles.get(str(role_id), "")

    def find_member(self, token):
        digits = "".join(ch for ch in token if ch.isdigit())
        if digits and int(digits) in self.members:
            return int(digits)
        return None

    async def assign_roles(self, member_id, role_ids):
        applied = [r for r in role_ids if r in self.roles]
        self.granted.setdefault(member_id, []).extend(applied)
        return applied

    async def remove_roles(self, member_id, role_ids):
        applied = [r for r in role_ids if r in self.roles]
        self.revoked.setdefault(member_id, []).extend(applied)
        return applied

    async def purge(self, limit):
        self.purged.append(limit)
        return limit


class FakeTransport:
    def __init__(self) -> None:
        self.delivered = []

    async def deliver(self, response):
        self.delivered.append(response)


class FakeFList:
    """Profile source returning canned profiles keyed by character name."""

    def __init__(self) -> None:
        self.profiles: Dict[str, Profile] = {}
        self.requested: List[str] = []
        self.refreshes = 0

    async def fetch_profile(self, identifier):
        self.requested.append(identifier)
        try:
            return self.profiles[identifier]
        except KeyError:
            raise UpstreamError(f"Character not found: {identifier}") from None

    async def refresh_catalog(self):
        self.refreshes += 1
        return 4


@pytest.fixture
def catalog():
    return Catalog.load(RAW_KINKS)


@pytest.fixture
def holder(catalog):
    return PreferenceCatalog(catalog, ticket="ticket-1")


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, holder):
    return RoleStore(storage, lambda: holder.catalog)


@pytest.fixture
def flist():
    return FakeFList()


@pytest.fixture
def services(holder, store, flist):
    return Services(
        catalog=holder,
        roles=store,
        flist=flist,
        registry=REGISTRY,
        prefix=".flist",
        admins=frozenset({ADMIN_ID}),
    )


@pytest.fixture
def dispatcher(services):
    return Dispatcher(services)


@pytest.fixture
def scope():
    return FakeScope({"111": "Rope Fans", "222": "Impact Play", "333": "Newcomer"})


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def run_command(dispatcher, scope, transport):
    """Dispatch ``content`` as ``actor`` in the fake guild (``in_guild=False`` for DMs)."""

    async def _run(content, actor=USER_ID, in_guild=True):
        return await dispatcher.handle_message(content, actor, scope if in_guild else None, transport)

    return _run
