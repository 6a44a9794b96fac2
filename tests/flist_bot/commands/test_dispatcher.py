import pytest

from flist_bot.commands import CommandRegistry, command
from flist_bot.commands.dispatcher import (
    DELIVERY_FAILED,
    HANDLER_FAILED,
    NOT_AUTHORIZED,
    NOT_IN_GUILD,
    SAVE_FAILED,
    UPSTREAM_FAILED,
    Dispatcher,
    DispatchState,
    normalize,
)
from flist_bot.commands.responses import ACCENT_COLOR, RichResponse, TextResponse
from flist_bot.kinks import Profile

ADMIN_ID = 1
USER_ID = 2


@pytest.mark.parametrize(
    "content",
    ["hello there", ".flistx help", ".flist", "   ", ".flist frobnicate now", "help"],
)
@pytest.mark.asyncio
async def test_non_commands_are_ignored_silently(run_command, transport, content):
    result = await run_command(content)
    assert result.state is DispatchState.IGNORED
    assert transport.delivered == []


@pytest.mark.asyncio
async def test_prefix_and_command_are_case_insensitive(run_command, transport):
    result = await run_command(".FLIST Help")
    assert result.state is DispatchState.COMPLETED
    assert result.command == "help"
    assert len(transport.delivered) == 1


@pytest.mark.asyncio
async def test_non_admin_rejected_before_handler_runs(run_command, transport, store, storage):
    result = await run_command(".flist assign 111 Rope", actor=USER_ID)

    assert result.state is DispatchState.REJECTED
    assert transport.delivered == [TextResponse(NOT_AUTHORIZED)]
    assert store.mapping == {}
    assert storage.saves == []


@pytest.mark.asyncio
async def test_guild_only_command_rejected_in_dms(run_command, transport, scope):
    result = await run_command(".flist ilike 111", in_guild=False)

    assert result.state is DispatchState.REJECTED
    assert transport.delivered == [TextResponse(NOT_IN_GUILD)]
    assert scope.granted == {}


@pytest.mark.asyncio
async def test_authorization_is_checked_before_scope(run_command, transport):
    await run_command(".flist default", actor=USER_ID, in_guild=False)
    await run_command(".flist default", actor=ADMIN_ID, in_guild=False)
    assert transport.delivered == [TextResponse(NOT_AUTHORIZED), TextResponse(NOT_IN_GUILD)]


@pytest.mark.asyncio
async def test_handler_raised_authorization_error_is_a_rejection(run_command, transport, flist):
    result = await run_command(".flist get Alice for <@3>", actor=USER_ID)

    assert result.state is DispatchState.REJECTED
    assert transport.delivered == [TextResponse(NOT_AUTHORIZED)]
    assert flist.requested == []


@pytest.mark.asyncio
async def test_usage_error_shows_usage_line(run_command, transport):
    result = await run_command(".flist assign", actor=ADMIN_ID)

    assert result.state is DispatchState.FAILED
    (response,) = transport.delivered
    assert response.content.startswith(":warning: Missing parameter: role\nUsage: `.flist assign <role> <kinks, ...>`")


@pytest.mark.asyncio
async def test_upstream_failure_is_generic(run_command, transport):
    result = await run_command(".flist get Nobody")

    assert result.state is DispatchState.FAILED
    assert transport.delivered == [TextResponse(UPSTREAM_FAILED)]


@pytest.mark.asyncio
async def test_persistence_failure_keeps_change(run_command, transport, store, storage):
    storage.fail = True
    result = await run_command(".flist assign 111 Rope", actor=ADMIN_ID)

    assert result.state is DispatchState.FAILED
    assert transport.delivered == [TextResponse(SAVE_FAILED)]
    assert store.items_for_role("111") == ("43",)


@pytest.mark.asyncio
async def test_unexpected_errors_are_contained(services, scope, transport):
    registry = CommandRegistry()

    @command("boom", registry=registry)
    async def boom(ctx):
        raise RuntimeError("kaboom")

    @command("weird", registry=registry)
    async def weird(ctx):
        return 42

    dispatcher = Dispatcher(services, registry=registry)
    first = await dispatcher.handle_message(".flist boom", USER_ID, scope, transport)
    second = await dispatcher.handle_message(".flist weird", USER_ID, scope, transport)

    assert first.state is DispatchState.FAILED
    assert second.state is DispatchState.FAILED
    assert transport.delivered == [TextResponse(HANDLER_FAILED), TextResponse(HANDLER_FAILED)]


@pytest.mark.asyncio
async def test_empty_handler_result_delivers_nothing(services, scope, transport):
    registry = CommandRegistry()

    @command("quiet", registry=registry)
    async def quiet(ctx):
        return ["", RichResponse()]

    dispatcher = Dispatcher(services, registry=registry)
    result = await dispatcher.handle_message(".flist quiet", USER_ID, scope, transport)

    assert result.state is DispatchState.COMPLETED
    assert transport.delivered == []


def test_normalize_variants():
    assert normalize(None) == []
    assert normalize("   ", "F-List") == []
    assert normalize("hi", "F-List") == [TextResponse("**F-List**\nhi")]
    assert normalize("hi") == [TextResponse("hi")]

    (rich,) = normalize(RichResponse(title="Kinks", private=True), "F-List")
    assert rich.title == "F-List - Kinks"
    assert rich.color == ACCENT_COLOR
    assert rich.private

    (untitled,) = normalize(RichResponse(description="body"))
    assert untitled.title is None
    assert untitled.color == ACCENT_COLOR

    nested = normalize(["a", [TextResponse("b", private=True)], None])
    assert nested == [TextResponse("a"), TextResponse("b", private=True)]

    with pytest.raises(TypeError):
        normalize(42)


class ClosedDMTransport:
    """Transport whose private sends fail like a member with DMs closed."""

    def __init__(self, fail_public=False) -> None:
        self.delivered = []
        self.fail_public = fail_public

    async def deliver(self, response):
        if response.private or self.fail_public:
            raise RuntimeError("Cannot send messages to this user")
        self.delivered.append(response)


@pytest.mark.asyncio
async def test_failed_private_delivery_reports_in_channel(dispatcher, scope, flist):
    flist.profiles["Alice"] = Profile("Alice", {"42": "yes"})
    transport = ClosedDMTransport()

    result = await dispatcher.handle_message(".flist diagnose Alice", USER_ID, scope, transport)

    assert result.state is DispatchState.COMPLETED
    assert transport.delivered == [TextResponse(DELIVERY_FAILED)]


@pytest.mark.asyncio
async def test_failed_delivery_does_not_escape_dispatch(dispatcher, scope):
    transport = ClosedDMTransport(fail_public=True)

    result = await dispatcher.handle_message(".flist help", USER_ID, scope, transport)

    assert result.state is DispatchState.COMPLETED
    assert transport.delivered == []
