# This file is part of FragQuant.
#
# Licensed under MIT License.


def format_minutes(seconds):
    """Render elapsed seconds as ``M minutes and S.SS secs``."""
    mins = int(seconds // 60)
    secs = seconds - mins * 60
    return f'{mins} minutes and {secs:.2f} secs'
