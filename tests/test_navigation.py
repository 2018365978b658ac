from models.navigation import Pane
from models.playback import TransportStatus
from conftest import A, B, C


class TestCursorMoves:
    """Tests for saturating cursor moves."""

    def test_initial_selection_is_first_on_shelf(self, navigation):
        """The first shelf position holds B in the test play order."""
        assert navigation.pane is Pane.ALBUM_LIST
        assert navigation.selected_album_index == B
        assert navigation.selected_track_index == 0

    def test_move_down_walks_play_order(self, navigation):
        navigation.move_down()
        assert navigation.selected_album_index == A

        navigation.move_down()
        assert navigation.selected_album_index == C

    def test_album_cursor_saturates_at_bottom(self, navigation):
        for _ in range(10):
            navigation.move_down()

        assert navigation.focus.album_cursor == 2

    def test_album_cursor_saturates_at_top(self, navigation):
        navigation.move_up()

        assert navigation.focus.album_cursor == 0

    def test_song_cursor_saturates(self, navigation):
        """C has three tracks; the song cursor stays within them."""
        navigation.jump_to_position(2)
        navigation.move_right()

        for _ in range(5):
            navigation.move_down()
        assert navigation.selected_track_index == 2

        for _ in range(5):
            navigation.move_up()
        assert navigation.selected_track_index == 0

    def test_moving_album_cursor_resets_song_cursor(self, navigation):
        navigation.jump_to_position(2)
        navigation.move_right()
        navigation.move_down()
        navigation.move_left()

        navigation.move_up()

        assert navigation.focus.song_cursor == 0

    def test_album_move_at_bound_keeps_song_cursor(self, navigation):
        navigation.jump_to_position(2)
        navigation.focus.song_cursor = 1

        navigation.move_down()

        assert navigation.focus.song_cursor == 1


class TestPaneSwitching:
    """Tests for h/l and focus switching."""

    def test_move_right_enters_song_list_at_top(self, navigation):
        navigation.move_right()

        assert navigation.pane is Pane.SONG_LIST
        assert navigation.selected_track_index == 0

    def test_move_right_lands_on_playing_track(self, navigation, session):
        """Entering the loaded album's songs puts the cursor on the current track."""
        session.playback.album_index = C
        session.playback.track_index = 2
        session.playback.status = TransportStatus.PLAYING
        navigation.jump_to_position(2)

        navigation.move_right()

        assert navigation.selected_track_index == 2

    def test_move_right_in_song_list_is_noop(self, navigation):
        navigation.move_right()
        navigation.move_right()

        assert navigation.pane is Pane.SONG_LIST

    def test_move_left_returns_to_shelf(self, navigation):
        navigation.move_right()
        navigation.move_left()

        assert navigation.pane is Pane.ALBUM_LIST

    def test_move_left_on_shelf_is_noop(self, navigation):
        navigation.move_left()

        assert navigation.pane is Pane.ALBUM_LIST
        assert navigation.focus.album_cursor == 0

    def test_focus_switch_keeps_cursors(self, navigation):
        """Changing focus never moves a cursor."""
        navigation.jump_to_position(2)
        navigation.focus.song_cursor = 1

        navigation.focus_pane(Pane.SONG_LIST)
        assert navigation.focus.album_cursor == 2
        assert navigation.focus.song_cursor == 1

        navigation.focus_pane(Pane.ALBUM_LIST)
        assert navigation.focus.album_cursor == 2
        assert navigation.focus.song_cursor == 1

    def test_moves_apply_to_focused_pane(self, navigation):
        navigation.jump_to_position(2)
        navigation.focus_pane(Pane.SONG_LIST)

        navigation.move_down()

        assert navigation.focus.album_cursor == 2
        assert navigation.focus.song_cursor == 1


class TestJumps:
    """Tests for gg, G and half-page moves."""

    def test_gg_jumps_to_top(self, navigation):
        navigation.jump_to_position(2)

        navigation.press_g()
        assert navigation.focus.album_cursor == 2

        navigation.press_g()
        assert navigation.focus.album_cursor == 0

    def test_pending_g_cleared(self, navigation):
        navigation.jump_to_position(2)
        navigation.press_g()
        navigation.clear_pending()

        navigation.press_g()

        assert navigation.focus.album_cursor == 2

    def test_jump_to_bottom(self, navigation):
        navigation.jump_to_bottom()

        assert navigation.selected_album_index == C

    def test_half_pages(self, navigation):
        """Three albums make a half page of one."""
        navigation.half_page_down()
        assert navigation.focus.album_cursor == 1

        navigation.half_page_down()
        navigation.half_page_down()
        assert navigation.focus.album_cursor == 2

        navigation.half_page_up()
        assert navigation.focus.album_cursor == 1

    def test_jump_to_position_focuses_shelf(self, navigation):
        navigation.move_right()

        navigation.jump_to_position(1)

        assert navigation.pane is Pane.ALBUM_LIST
        assert navigation.selected_album_index == A

    def test_jump_to_position_clamps(self, navigation):
        navigation.jump_to_position(99)

        assert navigation.focus.album_cursor == 2
