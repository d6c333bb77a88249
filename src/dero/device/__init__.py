# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# Keyboard event stages
# device level:
# stage 0: window toolkit; map toolkit key events to KeyEvents, spotting autorepeat and caps lock (tk_window)
# stage 1: track modifier keydown/up and annotate keystream with current modifiers
# stage 2: keep keystrokes, drop releases, bare modifiers and unwanted repeats; attach typed characters

# editor level:
# stage 3: match chords to commands; anything unmatched with a character and no command modifier is text input
