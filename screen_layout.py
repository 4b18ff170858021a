import curses


class ScreenLayout:
    """Grid on top, then one line of sheet tabs, then the status/prompt line."""

    TABS_H = 1
    STATUS_H = 1
    MIN_GRID_H = 3

    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.build()

    def build(self):
        self.H, self.W = self.stdscr.getmaxyx()
        self.table_h = max(self.MIN_GRID_H, self.H - self.TABS_H - self.STATUS_H)

        self.table_win = curses.newwin(self.table_h, self.W, 0, 0)
        self.table_win.leaveok(True)

        tabs_y = self.table_h
        self.tabs_win = curses.newwin(self.TABS_H, self.W, tabs_y, 0)
        self.tabs_win.leaveok(True)

        # prompt line draws its own cursor here
        self.status_win = curses.newwin(self.STATUS_H, self.W, tabs_y + self.TABS_H, 0)

    def resize(self):
        curses.update_lines_cols()
        self.stdscr.erase()
        self.build()
