import pytest

from livebracket.manager import TOURNAMENT_NOT_FOUND
from livebracket.models.db.tournament import (
    CustomCoords,
    Partition,
    TournamentFormat,
    TournamentSettings,
    TournamentSettingsUpdate,
)
from livebracket.notifications.display import DisplayMessageType
from livebracket.notifications.events import (
    MATCH_UPDATED_EVENT,
    TOURNAMENT_ENDED_EVENT,
    TOURNAMENT_STARTED_EVENT,
)
from livebracket.utils.id_types import TournamentId
from tests.unit_tests.fakes import PLAYER_NAMES, ManagerHarness

SINGLE = TournamentSettings(format=TournamentFormat.SINGLE_ELIMINATION)
DOUBLE = TournamentSettings(format=TournamentFormat.DOUBLE_ELIMINATION)
ROUND_ROBIN = TournamentSettings(format=TournamentFormat.ROUND_ROBIN)


@pytest.mark.asyncio
async def test_create_rejects_bad_rosters() -> None:
    manager = ManagerHarness().manager

    assert await manager.create_tournament("Cup", ["Ada"]) is None
    assert await manager.create_tournament("Cup", ["Ada", "Ada"]) is None
    assert await manager.create_tournament("Cup", ["Ada", "  "]) is None
    assert not await manager.check_tournament_exists(TournamentId("tournament_Cup"))


@pytest.mark.asyncio
async def test_create_refuses_existing_id_unless_overwriting() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, DOUBLE)
    original_uuid = (await harness.state(tournament_id)).uuid

    assert await harness.manager.create_tournament("Test Cup", PLAYER_NAMES[:3]) is None
    assert (await harness.state(tournament_id)).uuid == original_uuid

    replaced = await harness.manager.create_tournament(
        "Test Cup", PLAYER_NAMES[:3], overwrite=True
    )
    assert replaced is not None
    assert replaced.uuid != original_uuid
    assert len((await harness.state(tournament_id)).tournament_data.players) == 3


@pytest.mark.asyncio
async def test_create_trims_names_and_keeps_display_settings() -> None:
    harness = ManagerHarness()
    created = await harness.manager.create_tournament(
        "Friday Night",
        [" Ada ", "Bram"],
        settings=SINGLE,
        styles={"accent": "#ff0000"},
        position="Top Left",
        overlay_instance="stream-a",
    )

    assert created is not None
    assert sorted(player.name for player in created.tournament_data.players) == ["Ada", "Bram"]
    assert created.tournament_data.styles == {"accent": "#ff0000"}
    assert created.position == "Top Left"
    assert created.overlay_instance == "stream-a"
    assert await harness.manager.is_tournament_active(TournamentId("tournament_Friday_Night"))


@pytest.mark.asyncio
async def test_start_emits_players_in_seed_order() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, DOUBLE)
    players = (await harness.state(tournament_id)).tournament_data.players

    assert await harness.manager.start_tournament(tournament_id)

    [payload] = harness.events.payloads(TOURNAMENT_STARTED_EVENT)
    assert payload == {
        "tournamentId": tournament_id,
        "title": "Test Cup",
        "players": [player.name for player in sorted(players, key=lambda player: player.seed)],
    }
    assert harness.display.types()[-1] == DisplayMessageType.UPDATE


@pytest.mark.asyncio
async def test_match_result_emits_update_event() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, SINGLE)
    match = await harness.first_open_match(tournament_id)

    assert await harness.manager.set_match_winner(tournament_id, match.id, "2")

    [payload] = harness.events.payloads(MATCH_UPDATED_EVENT)
    assert payload == {
        "tournamentId": tournament_id,
        "title": "Test Cup",
        "matchNumber": match.match_number,
        "player1": match.player1,
        "player2": match.player2,
        "winner": match.player2,
        "bracketStage": "winners",
        "round": 1,
        "isDraw": False,
        "drawHandling": None,
    }


@pytest.mark.asyncio
async def test_draw_pushes_notification_and_labels_event() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, SINGLE)
    match = await harness.first_open_match(tournament_id)

    assert await harness.manager.set_match_winner(tournament_id, match.id, "Draw", "replay")

    [payload] = harness.events.payloads(MATCH_UPDATED_EVENT)
    assert payload["winner"] == "Draw - Replay Required"
    assert payload["isDraw"] is True
    assert payload["drawHandling"] == "replay"

    _, notification = harness.display.messages[-2]
    assert notification.type == DisplayMessageType.DRAW_NOTIFICATION
    assert notification.config.match_number == match.match_number
    assert notification.config.message == "Match ended in a draw. Please replay the match."
    assert harness.display.types()[-1] == DisplayMessageType.UPDATE


@pytest.mark.asyncio
async def test_natural_end_keeps_display_then_retracts_it() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(2, SINGLE)
    match = await harness.first_open_match(tournament_id)
    harness.clock.advance(minutes=5)

    assert await harness.manager.set_match_winner(tournament_id, match.id, 1)

    state = await harness.state(tournament_id)
    assert state.ended
    assert not state.manually_ended
    assert state.tournament_data.winner == match.player1

    [payload] = harness.events.payloads(TOURNAMENT_ENDED_EVENT)
    assert payload == {
        "tournamentId": tournament_id,
        "title": "Test Cup",
        "winner": match.player1,
        "matchesPlayed": 1,
        "duration": 300,
    }

    _, final_update = harness.display.messages[-1]
    assert final_update.type == DisplayMessageType.UPDATE
    assert final_update.config.ended is True
    assert harness.scheduler.delays("retract-display") == [30]

    assert await harness.scheduler.run("retract-display") == 1
    assert harness.display.types()[-1] == DisplayMessageType.REMOVE
    assert await harness.manager.get_status(tournament_id) == "Tournament Complete"


@pytest.mark.asyncio
async def test_display_duration_setting_controls_retraction_delay() -> None:
    harness = ManagerHarness()
    settings = TournamentSettings(format=TournamentFormat.SINGLE_ELIMINATION, display_duration=90)
    tournament_id = await harness.create(2, settings)
    match = await harness.first_open_match(tournament_id)

    assert await harness.manager.set_match_winner(tournament_id, match.id, 2)

    assert harness.scheduler.delays("retract-display") == [90]


@pytest.mark.asyncio
async def test_retraction_is_skipped_after_reset() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(2, SINGLE)
    match = await harness.first_open_match(tournament_id)
    assert await harness.manager.set_match_winner(tournament_id, match.id, 1)
    assert await harness.manager.reset_tournament_with_undo(tournament_id)
    message_count = len(harness.display.messages)

    assert await harness.scheduler.run("retract-display") == 1

    assert len(harness.display.messages) == message_count
    assert not (await harness.state(tournament_id)).ended


@pytest.mark.asyncio
async def test_manual_stop_removes_display_immediately() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, ROUND_ROBIN)
    match = await harness.first_open_match(tournament_id)
    assert await harness.manager.set_match_winner(tournament_id, match.id, 1)

    assert await harness.manager.end_tournament(tournament_id, manual=True)

    state = await harness.state(tournament_id)
    assert state.ended
    assert state.manually_ended
    assert state.tournament_data.winner is None
    assert harness.events.payloads(TOURNAMENT_ENDED_EVENT) == []
    assert harness.display.types()[-1] == DisplayMessageType.REMOVE
    assert harness.scheduler.delays("retract-display") == []
    assert await harness.manager.get_ended_tournaments() == [tournament_id]
    assert await harness.manager.get_active_tournaments() == []


@pytest.mark.asyncio
async def test_start_after_stop_reactivates() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, DOUBLE)
    assert await harness.manager.end_tournament(tournament_id, manual=True)

    assert await harness.manager.start_tournament(tournament_id)

    state = await harness.state(tournament_id)
    assert not state.ended
    assert not state.manually_ended


@pytest.mark.asyncio
async def test_add_player_resets_with_larger_roster() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, DOUBLE)
    match = await harness.first_open_match(tournament_id)
    assert await harness.manager.set_match_winner(tournament_id, match.id, 1)

    assert await harness.manager.add_player(tournament_id, " Zed ")

    data = (await harness.state(tournament_id)).tournament_data
    assert sorted(player.name for player in data.players) == sorted([*PLAYER_NAMES[:4], "Zed"])
    assert data.completed_matches == []
    assert data.initial_player_count == 5
    assert await harness.manager.can_undo_reset(tournament_id)

    assert not await harness.manager.add_player(tournament_id, "Zed")
    assert not await harness.manager.add_player(tournament_id, "   ")


@pytest.mark.asyncio
async def test_remove_player_keeps_at_least_two() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(3, DOUBLE)

    assert await harness.manager.remove_player(tournament_id, "Ada")
    names = [player.name for player in (await harness.state(tournament_id)).tournament_data.players]
    assert sorted(names) == ["Bram", "Cleo"]

    assert not await harness.manager.remove_player(tournament_id, "Ada")
    assert not await harness.manager.remove_player(tournament_id, "Bram")
    assert not await harness.manager.remove_player(TournamentId("tournament_nope"), "Bram")


@pytest.mark.asyncio
async def test_replace_player_renames_in_place() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, SINGLE)
    match = await harness.first_open_match(tournament_id)
    old_name = match.player1
    original = (await harness.state(tournament_id)).tournament_data.get_player(old_name)

    assert await harness.manager.replace_player(tournament_id, old_name, "Zoe")

    data = (await harness.state(tournament_id)).tournament_data
    renamed = data.get_player("Zoe")
    assert renamed is not None
    assert original is not None
    assert renamed.seed == original.seed
    assert data.get_player(old_name) is None
    assert data.current_matches[0].player1 == "Zoe"
    assert data.current_matches[0].id == match.id

    assert not await harness.manager.replace_player(tournament_id, "Zoe", match.player2)
    assert not await harness.manager.replace_player(tournament_id, "Nobody", "Yan")
    assert not await harness.manager.replace_player(tournament_id, "Zoe", " ")


@pytest.mark.asyncio
async def test_format_change_resets_and_can_be_undone() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, DOUBLE)
    match = await harness.first_open_match(tournament_id)
    assert await harness.manager.set_match_winner(tournament_id, match.id, 1)

    update = TournamentSettingsUpdate(format=TournamentFormat.ROUND_ROBIN)
    assert await harness.manager.update_settings(tournament_id, update)

    data = (await harness.state(tournament_id)).tournament_data
    assert data.format == TournamentFormat.ROUND_ROBIN
    assert data.completed_matches == []
    assert len(data.current_matches) == 6
    assert all(player.partition == Partition.ROUND_ROBIN for player in data.players)

    assert await harness.manager.undo_reset(tournament_id)

    restored = (await harness.state(tournament_id)).tournament_data
    assert restored.format == TournamentFormat.DOUBLE_ELIMINATION
    assert len(restored.completed_matches) == 1


@pytest.mark.asyncio
async def test_display_only_settings_do_not_reset() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, DOUBLE)
    match = await harness.first_open_match(tournament_id)
    assert await harness.manager.set_match_winner(tournament_id, match.id, 1)

    update = TournamentSettingsUpdate(show_seed=False, max_visible_matches=4)
    assert await harness.manager.update_settings(tournament_id, update)

    data = (await harness.state(tournament_id)).tournament_data
    assert not data.settings.show_seed
    assert data.settings.max_visible_matches == 4
    assert data.settings.format == TournamentFormat.DOUBLE_ELIMINATION
    assert len(data.completed_matches) == 1
    assert not await harness.manager.can_undo_reset(tournament_id)


@pytest.mark.asyncio
async def test_status_text() -> None:
    harness = ManagerHarness()
    single = await harness.create(8, SINGLE, title="Single")
    double = await harness.create(4, DOUBLE, title="Double")
    round_robin = await harness.create(4, ROUND_ROBIN, title="League")

    assert await harness.manager.get_status(single) == "Single Elimination - Quarterfinals"
    assert await harness.manager.get_status(double) == "Main Bracket - Semifinals"
    assert await harness.manager.get_status(round_robin) == "Round Robin - 0/6 Matches Complete"
    assert await harness.manager.get_status(TournamentId("tournament_x")) == TOURNAMENT_NOT_FOUND


@pytest.mark.asyncio
async def test_current_match_is_first_open_match() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, SINGLE)

    current = await harness.manager.get_current_match(tournament_id)

    assert current == await harness.first_open_match(tournament_id)
    assert await harness.manager.get_current_match(TournamentId("tournament_x")) is None


@pytest.mark.asyncio
async def test_display_updates() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, SINGLE)

    assert await harness.manager.update_styles(tournament_id, {"accent": "#00ff00"})
    assert await harness.manager.update_position(
        tournament_id, "Custom", CustomCoords(top=10, left=20)
    )
    assert await harness.manager.update_overlay_instance(tournament_id, "stream-b")

    state = await harness.state(tournament_id)
    assert state.tournament_data.styles == {"accent": "#00ff00"}
    assert state.position == "Custom"
    assert state.custom_coords == CustomCoords(top=10, left=20)
    assert state.overlay_instance == "stream-b"

    assert await harness.manager.set_visibility(tournament_id, False)
    assert await harness.manager.set_visibility(tournament_id, True)
    assert harness.display.types()[-2:] == [DisplayMessageType.HIDE, DisplayMessageType.SHOW]

    channel, shown = harness.display.messages[-1]
    assert channel == "tournament-updater"
    assert shown.overlay_instance == "stream-b"
    assert shown.to_payload()["config"]["tournamentTitle"] == "Test_Cup"


@pytest.mark.asyncio
async def test_tournament_listing() -> None:
    harness = ManagerHarness()
    active = await harness.create(4, DOUBLE, title="Active")
    ended = await harness.create(4, DOUBLE, title="Ended")
    assert await harness.manager.end_tournament(ended, manual=True)

    summaries = await harness.manager.get_all_tournaments_with_status()

    assert {(summary.tournament_id, summary.status) for summary in summaries} == {
        (active, "active"),
        (ended, "ended"),
    }


@pytest.mark.asyncio
async def test_operations_on_missing_tournament_fail() -> None:
    manager = ManagerHarness().manager
    missing = TournamentId("tournament_missing")

    assert not await manager.start_tournament(missing)
    assert not await manager.end_tournament(missing)
    assert not await manager.advance_to_next_round(missing)
    assert not await manager.update_settings(missing, TournamentSettingsUpdate(show_seed=False))
    assert not await manager.update_styles(missing, {})
    assert not await manager.set_visibility(missing, True)
    assert not await manager.add_player(missing, "Zed")
    assert await manager.recalculate_standings(missing) is None


@pytest.mark.asyncio
async def test_advance_waits_for_open_matches() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, SINGLE)
    before = (await harness.state(tournament_id)).tournament_data.current_matches

    assert await harness.manager.advance_to_next_round(tournament_id)

    after = (await harness.state(tournament_id)).tournament_data
    assert after.current_matches == before
    assert after.winners_round == 1

    assert await harness.manager.end_tournament(tournament_id, manual=True)
    assert not await harness.manager.advance_to_next_round(tournament_id)


@pytest.mark.asyncio
async def test_plain_reset_flags_overlay_and_keeps_no_undo() -> None:
    harness = ManagerHarness()
    tournament_id = await harness.create(4, DOUBLE)
    match = await harness.first_open_match(tournament_id)
    assert await harness.manager.set_match_winner(tournament_id, match.id, 1)

    assert await harness.manager.reset_tournament(tournament_id)

    assert (await harness.state(tournament_id)).tournament_data.completed_matches == []
    _, update = harness.display.messages[-1]
    assert update.config.is_resetting is True
    assert update.config.ended is False
    assert not await harness.manager.can_undo_reset(tournament_id)
