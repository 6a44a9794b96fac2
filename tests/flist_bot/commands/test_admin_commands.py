import asyncio
from unittest.mock import AsyncMock

import pytest

from flist_bot.commands.dispatcher import NOT_AUTHORIZED, DispatchState
from flist_bot.commands.handlers import admin as admin_handlers
from flist_bot.commands.responses import EmbedField, TextResponse
from flist_bot.roles import RoleStore
from flist_bot.roles.store import KINKS_FILE, SETTINGS_FILE

ADMIN_ID = 1
USER_ID = 2


@pytest.fixture
def run_admin(run_command):
    async def _run(content, **kwargs):
        return await run_command(content, actor=ADMIN_ID, **kwargs)

    return _run


@pytest.mark.asyncio
async def test_assign_links_kinks_and_persists(run_admin, transport, store, storage):
    await run_admin(".flist assign 111 Bondage, rope")

    assert store.mapping == {"111": ("42", "43")}
    assert storage.data[KINKS_FILE] == {"111": ["42", "43"]}
    assert transport.delivered == [TextResponse("Kink map successfully updated.")]


@pytest.mark.asyncio
async def test_assign_reports_already_linked(run_admin, transport, store):
    store.add_items_to_role("111", ["43"])
    await run_admin(".flist map <@&111> Rope, 42")

    assert store.mapping == {"111": ("43", "42")}
    assert transport.delivered == [
        TextResponse("Kink map successfully updated.\nAlready linked: 43: **Rope**")
    ]


@pytest.mark.asyncio
async def test_assign_through_alias(run_admin, store):
    store.add_aliases("222", ["pain"])
    await run_admin(".flist link pain Spanking")
    assert store.mapping == {"222": ("50",)}


@pytest.mark.asyncio
async def test_assign_unknown_kink_changes_nothing(run_admin, transport, store, storage):
    await run_admin(".flist assign 111 Rope, whips")

    assert store.mapping == {}
    assert storage.saves == []
    assert transport.delivered == [TextResponse(':warning: Unknown kink: "whips"')]


@pytest.mark.asyncio
async def test_assign_unknown_role(run_admin, transport, store):
    await run_admin(".flist assign 999 Rope")

    assert store.mapping == {}
    assert transport.delivered == [TextResponse(':warning: Invalid role name or ID: "999"')]


@pytest.mark.asyncio
async def test_unassign(run_admin, transport, store):
    store.add_items_to_role("111", ["42", "43"])
    await run_admin(".flist unassign 111 Bondage")

    assert store.mapping == {"111": ("43",)}
    assert transport.delivered == [TextResponse("Kink map successfully updated.")]


@pytest.mark.asyncio
async def test_unassign_stale_role_and_kink(run_admin, transport, services, storage, holder):
    services.roles = RoleStore(storage, lambda: holder.catalog, mapping={"444": ["9999"]})
    result = await run_admin(".flist unlink 444 9999")

    assert result.state is DispatchState.COMPLETED
    assert services.roles.mapping == {}


@pytest.mark.asyncio
async def test_assigned_views(run_admin, transport, store):
    await run_admin(".flist assigned")
    store.add_items_to_role("111", ["42", "43"])
    await run_admin(".flist assigned")
    await run_admin(".flist assigned 111")
    await run_admin(".flist mapped 222")

    empty, everything, one, none_for_role = transport.delivered
    assert empty == TextResponse("**F-List**\nNo kinks are assigned to any role.")
    assert everything.title == "F-List - Assigned Kinks"
    assert everything.fields == [EmbedField("Rope Fans", "42: **Bondage**\n43: **Rope**")]
    assert one.title == 'F-List - Kinks assigned to "Rope Fans"'
    assert one.description == "42: **Bondage**\n43: **Rope**"
    assert none_for_role == TextResponse('**F-List**\nThere are no kinks assigned to "Impact Play"')


@pytest.mark.asyncio
async def test_alias_add_view_remove(run_admin, transport, store):
    await run_admin(".flist alias add 111 ropes, knots")
    assert store.aliases == {"111": ("ropes", "knots")}
    assert transport.delivered[-1] == TextResponse('**F-List**\nAliases updated for role "Rope Fans"')

    await run_admin(".flist alias view")
    assert transport.delivered[-1].title == "F-List - All Role Aliases"
    assert transport.delivered[-1].description == "Rope Fans => ropes, knots"

    await run_admin(".flist aliases list ropes")
    assert transport.delivered[-1].title == 'F-List - Aliases for "Rope Fans"'

    await run_admin(".flist alias remove ropes knots")
    assert store.aliases == {"111": ("ropes",)}

    await run_admin(".flist alias clear 111 ropes")
    await run_admin(".flist alias view")
    assert store.aliases == {}
    assert transport.delivered[-1] == TextResponse("**F-List**\nNo role aliases are set.")


@pytest.mark.asyncio
async def test_alias_view_role_without_aliases(run_admin, transport):
    await run_admin(".flist alias view 333")
    assert transport.delivered == [
        TextResponse('**F-List**\nThe role "Newcomer" does not have any aliases set.')
    ]


@pytest.mark.asyncio
async def test_alias_usage_errors(run_admin, transport, store):
    await run_admin(".flist alias add 111")
    await run_admin(".flist alias rename 111 x")

    missing, invalid = transport.delivered
    assert missing.content.startswith(":warning: Missing parameter: aliases\nUsage:")
    assert invalid.content.startswith(':warning: Invalid action: "rename"')
    assert store.aliases == {}


@pytest.mark.asyncio
async def test_default_role(run_admin, transport, store, storage):
    await run_admin(".flist default")
    await run_admin(".flist default <@&333>")
    await run_admin(".flist default none")

    assert [r.content for r in transport.delivered] == [
        "Default role: **(Not set)**",
        "Default role: **Newcomer**",
        "Default role: **(Not set)**",
    ]
    assert store.default_role is None
    assert storage.data[SETTINGS_FILE] == {"default": None}


@pytest.mark.asyncio
async def test_cleanup(run_admin, transport, scope):
    await run_admin(".flist cleanup")
    await run_admin(".flist prune 5")

    assert scope.purged == [50, 5]
    assert [r.content for r in transport.delivered] == [
        "Deleted 50 message(s).",
        "Deleted 5 message(s).",
    ]


@pytest.mark.parametrize("count", ["0", "501", "lots"])
@pytest.mark.asyncio
async def test_cleanup_rejects_bad_counts(run_admin, transport, scope, count):
    result = await run_admin(f".flist cleanup {count}")

    assert result.state is DispatchState.FAILED
    assert scope.purged == []
    assert "Usage: `.flist cleanup [count]`" in transport.delivered[0].content


@pytest.mark.asyncio
async def test_refresh(run_admin, transport, flist):
    await run_admin(".flist reload", in_guild=False)

    assert flist.refreshes == 1
    assert transport.delivered == [TextResponse("Kink list reloaded: 4 kinks.")]


@pytest.mark.asyncio
async def test_exit_schedules_shutdown(run_admin, transport, services, monkeypatch):
    monkeypatch.setattr(admin_handlers, "SHUTDOWN_DELAY", 0)
    services.shutdown = AsyncMock()

    await run_admin(".flist exit")
    assert len(admin_handlers._shutdown_tasks) == 1
    for _ in range(5):
        await asyncio.sleep(0)

    assert transport.delivered == [TextResponse("Goodbye!")]
    services.shutdown.assert_awaited_once()
    assert admin_handlers._shutdown_tasks == set()


@pytest.mark.asyncio
async def test_exit_logs_failed_shutdown(run_admin, services, monkeypatch, caplog):
    monkeypatch.setattr(admin_handlers, "SHUTDOWN_DELAY", 0)
    services.shutdown = AsyncMock(side_effect=RuntimeError("close failed"))

    await run_admin(".flist exit")
    for _ in range(5):
        await asyncio.sleep(0)

    assert admin_handlers._shutdown_tasks == set()
    assert "Shutdown failed" in caplog.text


@pytest.mark.asyncio
async def test_exit_without_shutdown_hook(run_admin, transport):
    await run_admin(".flist stop")
    assert transport.delivered == [TextResponse("Shutdown is not available.")]


@pytest.mark.asyncio
async def test_exit_requires_admin(run_command, transport, services):
    services.shutdown = AsyncMock()
    await run_command(".flist exit", actor=USER_ID)

    assert transport.delivered == [TextResponse(NOT_AUTHORIZED)]
    services.shutdown.assert_not_awaited()


@pytest.mark.asyncio
async def test_alias_add_rejects_numbers(run_admin, transport, store):
    result = await run_admin(".flist alias add 111 123")

    assert result.state is DispatchState.FAILED
    assert transport.delivered == [TextResponse(':warning: Alias cannot be a number: "123"')]
    assert store.aliases == {}
