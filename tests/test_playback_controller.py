import queue

import pytest

from models.errors import InvalidTransition
from models.playback import CommandKind, PlaybackState, Speed, TransportStatus
from services.playback_controller import PlaybackController
from conftest import A, B, C, drain


def kinds(commands):
    return [command.kind for command in drain(commands)]


class TestConstruction:

    def test_backend_gets_initial_volume_and_rate(self, session):
        commands = queue.Queue()
        session.playback = PlaybackState(volume=0.4)

        PlaybackController(session, commands)

        sent = drain(commands)
        assert [c.kind for c in sent] == [CommandKind.SET_VOLUME, CommandKind.SET_RATE]
        assert sent[0].value == 0.4
        assert sent[1].value == 1.0

    def test_starts_idle(self, controller, session):
        assert controller.status is TransportStatus.IDLE
        assert session.playback.is_loaded is False
        assert controller.current_album() is None
        assert controller.current_track() is None


class TestSelectAndCommit:
    """Tests for inserting albums and picking songs."""

    def test_insert_from_idle_loads_and_plays(self, controller, commands, session):
        controller.select_and_commit(B)

        sent = drain(commands)
        assert [c.kind for c in sent] == [CommandKind.LOAD, CommandKind.PLAY]
        assert sent[0].path == session.library.albums[B].tracks[0].file_path
        assert controller.status is TransportStatus.PLAYING
        assert session.playback.album_index == B
        assert session.playback.track_index == 0

    def test_insert_at_track(self, controller, commands, session):
        controller.select_and_commit(C, 2)

        sent = drain(commands)
        assert sent[0].path == session.library.albums[C].tracks[2].file_path
        assert session.playback.track_index == 2

    def test_different_album_reloads_and_resets(self, controller, commands, session):
        controller.select_and_commit(A)
        session.playback.elapsed = 42.0
        controller.toggle_play_pause()
        drain(commands)
        old_token = session.playback.load_token

        controller.select_and_commit(C)

        assert kinds(commands) == [CommandKind.LOAD, CommandKind.PLAY]
        assert session.playback.album_index == C
        assert session.playback.elapsed == 0.0
        assert session.playback.load_token > old_token
        assert controller.status is TransportStatus.PLAYING

    def test_same_album_paused_resumes(self, controller, commands, session):
        """Committing the paused album resumes instead of reloading."""
        controller.select_and_commit(A)
        controller.toggle_play_pause()
        session.playback.elapsed = 12.5
        drain(commands)

        controller.select_and_commit(A)

        assert kinds(commands) == [CommandKind.PLAY]
        assert controller.status is TransportStatus.PLAYING
        assert session.playback.elapsed == 12.5

    def test_same_album_playing_is_noop(self, controller, commands):
        controller.select_and_commit(A)
        drain(commands)

        controller.select_and_commit(A)

        assert kinds(commands) == []
        assert controller.status is TransportStatus.PLAYING

    def test_skip_to_song_while_playing(self, controller, commands, session):
        controller.select_and_commit(C)
        drain(commands)

        controller.select_and_commit(C, 2)

        sent = drain(commands)
        assert [c.kind for c in sent] == [CommandKind.LOAD, CommandKind.PLAY]
        assert sent[0].path == session.library.albums[C].tracks[2].file_path
        assert session.playback.track_index == 2
        assert controller.status is TransportStatus.PLAYING

    def test_skip_to_song_while_paused_stays_paused(self, controller, commands, session):
        """Picking another song on the paused album cues it without playing."""
        controller.select_and_commit(C)
        controller.toggle_play_pause()
        drain(commands)

        controller.select_and_commit(C, 1)

        assert kinds(commands) == [CommandKind.LOAD]
        assert session.playback.track_index == 1
        assert controller.status is TransportStatus.PAUSED

    def test_unknown_album(self, controller):
        with pytest.raises(IndexError):
            controller.select_and_commit(7)

    def test_unknown_track(self, controller):
        with pytest.raises(IndexError):
            controller.select_and_commit(B, 1)


class TestTogglePlayPause:

    def test_idle_is_invalid(self, controller, commands):
        """Toggling with nothing inserted reports and changes nothing."""
        with pytest.raises(InvalidTransition):
            controller.toggle_play_pause()

        assert controller.status is TransportStatus.IDLE
        assert kinds(commands) == []

    def test_playing_and_paused_alternate(self, controller, commands):
        controller.select_and_commit(A)
        drain(commands)

        assert controller.toggle_play_pause() is TransportStatus.PAUSED
        assert controller.toggle_play_pause() is TransportStatus.PLAYING
        assert kinds(commands) == [CommandKind.PAUSE, CommandKind.PLAY]


class TestEject:

    def test_eject_returns_to_idle(self, controller, commands, session):
        controller.select_and_commit(A)
        drain(commands)

        album = controller.eject()

        assert album is session.library.albums[A]
        assert kinds(commands) == [CommandKind.STOP]
        assert controller.status is TransportStatus.IDLE
        assert session.playback.album_index is None
        assert not session.playback.is_loaded

    def test_eject_when_idle(self, controller):
        with pytest.raises(InvalidTransition):
            controller.eject()


class TestSpeed:
    """Tests for RPM presets."""

    def test_set_speed_signals_rate_in_any_state(self, controller, commands):
        controller.set_speed(Speed.RPM45)

        sent = drain(commands)
        assert [c.kind for c in sent] == [CommandKind.SET_RATE]
        assert sent[0].value == pytest.approx(45 / 33)
        assert controller.state.speed is Speed.RPM45

    def test_speed_up_saturates_at_78(self, controller):
        for _ in range(5):
            controller.speed_up()

        assert controller.state.speed is Speed.RPM78

    def test_speed_down_saturates_at_33(self, controller):
        controller.speed_up()
        for _ in range(5):
            controller.speed_down()

        assert controller.state.speed is Speed.RPM33

    def test_speed_steps_through_presets(self, controller):
        assert controller.speed_up() is Speed.RPM45
        assert controller.speed_up() is Speed.RPM78
        assert controller.speed_down() is Speed.RPM45

    def test_invalid_speed(self, controller):
        with pytest.raises(ValueError):
            controller.set_speed(60)

    def test_multipliers(self):
        assert Speed.RPM33.multiplier == 1.0
        assert Speed.RPM78.multiplier == pytest.approx(78 / 33)


class TestVolume:

    @pytest.mark.parametrize("delta", [5.0, -5.0, 0.3, -0.3, 1e9, -1e9])
    def test_volume_stays_in_range(self, controller, delta):
        for _ in range(7):
            volume = controller.adjust_volume(delta)
            assert 0.0 <= volume <= 1.0

    def test_volume_adds_delta(self, controller, commands):
        volume = controller.adjust_volume(0.1)

        assert volume == pytest.approx(0.35)
        sent = drain(commands)
        assert sent[0].kind is CommandKind.SET_VOLUME
        assert sent[0].value == pytest.approx(0.35)

    def test_volume_clamps(self, controller):
        assert controller.adjust_volume(2.0) == 1.0
        assert controller.adjust_volume(-3.0) == 0.0


class TestBackendStatus:
    """Tests for status intake from the audio backend."""

    def test_track_finished_advances_within_album(self, controller, commands, session):
        controller.select_and_commit(A)
        drain(commands)

        assert controller.on_track_finished(session.playback.load_token) is True

        sent = drain(commands)
        assert [c.kind for c in sent] == [CommandKind.LOAD, CommandKind.PLAY]
        assert sent[0].path == session.library.albums[A].tracks[1].file_path
        assert session.playback.track_index == 1
        assert controller.status is TransportStatus.PLAYING

    def test_last_track_finished_goes_idle(self, controller, commands, session):
        """The player never moves on to another album by itself."""
        controller.select_and_commit(B)
        drain(commands)

        controller.on_track_finished(session.playback.load_token)

        assert kinds(commands) == [CommandKind.STOP]
        assert controller.status is TransportStatus.IDLE
        assert session.playback.album_index is None
        assert not session.playback.is_loaded

    def test_stale_finished_event_ignored(self, controller, session):
        """A finish report for a replaced track does not skip the new one."""
        controller.select_and_commit(A)
        stale = session.playback.load_token
        controller.select_and_commit(C)

        assert controller.on_track_finished(stale) is False
        assert session.playback.album_index == C
        assert session.playback.track_index == 0

    def test_finished_while_paused_cues_next(self, controller, commands, session):
        controller.select_and_commit(C)
        controller.toggle_play_pause()
        drain(commands)

        controller.on_track_finished(session.playback.load_token)

        assert kinds(commands) == [CommandKind.LOAD]
        assert session.playback.track_index == 1
        assert controller.status is TransportStatus.PAUSED

    def test_position_updates_elapsed(self, controller, session):
        controller.select_and_commit(C, 1)

        controller.on_track_position(30.0, session.playback.load_token)

        assert session.playback.elapsed == 30.0
        assert controller.album_elapsed() == pytest.approx(90.0)

    def test_stale_position_ignored(self, controller, session):
        controller.select_and_commit(C)

        controller.on_track_position(30.0, session.playback.load_token - 1)

        assert session.playback.elapsed == 0.0

    def test_backend_error_skips_track(self, controller, commands, session):
        """A bad file is treated as finished so the album keeps playing."""
        controller.select_and_commit(C)
        drain(commands)

        skipped = controller.on_backend_error("decode", "corrupt", session.playback.load_token)

        assert skipped is session.library.albums[C].tracks[0]
        assert session.playback.track_index == 1
        assert kinds(commands) == [CommandKind.LOAD, CommandKind.PLAY]

    def test_backend_error_on_last_track_goes_idle(self, controller, session):
        controller.select_and_commit(B)

        controller.on_backend_error("decode", "corrupt", session.playback.load_token)

        assert controller.status is TransportStatus.IDLE

    def test_stale_backend_error_ignored(self, controller, session):
        controller.select_and_commit(C)

        assert controller.on_backend_error("decode", "x", session.playback.load_token - 1) is None
        assert session.playback.track_index == 0

    def test_shutdown_sends_stop(self, controller, commands):
        controller.shutdown()

        assert kinds(commands) == [CommandKind.STOP]
