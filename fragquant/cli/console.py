# -*- coding: utf-8 -*-

# This file is part of FragQuant.
#
# Licensed under MIT License.

"""Human-readable stdout output for the FragQuant CLI.

Diagnostics go through Python logging (stderr or --logfile); the Console
only prints run progress and results to stdout.
"""

import sys
from time import perf_counter


class Stopwatch:
    """Named timing segments for the end-of-run summary."""

    def __init__(self):
        self._timings = []        # [(name, elapsed)]
        self._start = None
        self._active = None

    def start(self, name):
        """Close the running segment, if any, and open *name*."""
        now = perf_counter()
        if self._active:
            self._timings.append((self._active[0], now - self._active[1]))
        self._active = (name, now)
        if self._start is None:
            self._start = now

    def stop(self):
        if self._active:
            self._timings.append((self._active[0], perf_counter() - self._active[1]))
            self._active = None

    @property
    def total(self):
        return perf_counter() - self._start if self._start else 0.0

    @property
    def timings(self):
        return list(self._timings)


class Console:
    """Leveled stdout printer."""

    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3

    def __init__(self, level=NORMAL, stream=None):
        self.level = level
        self.stream = stream or sys.stdout
        self._use_color = hasattr(self.stream, 'isatty') and self.stream.isatty()

    def banner(self, version, subcommand):
        if self.level < self.NORMAL:
            return
        title = 'FragQuant v{} ({})'.format(version, subcommand)
        self._write('')
        self._write('\033[1m{}\033[0m'.format(title) if self._use_color else title)
        self._write('')

    def section(self, title):
        if self.level < self.NORMAL:
            return
        self._write('  {}'.format(title))

    def item(self, label, value, indent=4):
        """Print an aligned ``label: value`` line."""
        if self.level < self.NORMAL:
            return
        self._write('{}{:<20}{}'.format(' ' * indent, label + ':', value))

    def status(self, message):
        if self.level < self.NORMAL:
            return
        self._write('  {}'.format(message))

    def verbose(self, message):
        if self.level < self.VERBOSE:
            return
        self._write('    {}'.format(message))

    def blank(self):
        if self.level < self.NORMAL:
            return
        self._write('')

    def timing_table(self, stopwatch):
        if self.level < self.NORMAL:
            return
        timings = stopwatch.timings
        total = stopwatch.total
        if not timings:
            return
        self.section('Timing')
        for name, elapsed in timings:
            pct = '{:>4.0f}%'.format(elapsed / total * 100) if total > 0 else ''
            self._write('    {:<18}{:>7.2f}s{:>8}'.format(name, elapsed, pct))
        self._write('    ' + '-' * 33)
        self._write('    {:<18}{:>7.2f}s'.format('Total', total))

    def _write(self, text):
        print(text, file=self.stream)
