# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""Romanized Korean to Hangul syllables.

This is the bundled conversion function. It works on the input-method flavour of
Revised Romanization: every jamo has exactly one spelling as an initial and one as
a final, so ``g`` is always ㄱ and ``k`` is always ㅋ, even at the end of a syllable.

A run of letters converts only if it splits completely into syllables of the form
``initial? vowel final?``. Anything that isn't a Latin letter passes through as-is,
and a backslash makes the next character pass through as-is too.
"""

from __future__ import annotations

import typing

import pygtrie

from .editor.boundary import Converted, Rejected

if typing.TYPE_CHECKING:
    from .editor.boundary import ConversionResult

HANGUL_BASE = 0xAC00
VOWEL_COUNT = 21
FINAL_COUNT = 28
SILENT_INITIAL = 11  # ㅇ
ESCAPE = "\\"
LONGEST_JAMO = 3  # yae, wae, yeo

INITIALS = pygtrie.CharTrie(
    {
        "g": 0,
        "kk": 1,
        "gg": 1,
        "n": 2,
        "d": 3,
        "tt": 4,
        "dd": 4,
        "r": 5,
        "l": 5,
        "m": 6,
        "b": 7,
        "pp": 8,
        "bb": 8,
        "s": 9,
        "ss": 10,
        "j": 12,
        "jj": 13,
        "ch": 14,
        "k": 15,
        "t": 16,
        "p": 17,
        "h": 18,
    }
)

VOWELS = pygtrie.CharTrie(
    {
        "a": 0,
        "ae": 1,
        "ya": 2,
        "yae": 3,
        "eo": 4,
        "e": 5,
        "yeo": 6,
        "ye": 7,
        "o": 8,
        "wa": 9,
        "wae": 10,
        "oe": 11,
        "yo": 12,
        "u": 13,
        "wo": 14,
        "we": 15,
        "wi": 16,
        "yu": 17,
        "eu": 18,
        "ui": 19,
        "i": 20,
    }
)

FINALS = pygtrie.CharTrie(
    {
        "g": 1,
        "kk": 2,
        "gs": 3,
        "ks": 3,
        "n": 4,
        "nj": 5,
        "nh": 6,
        "d": 7,
        "l": 8,
        "r": 8,
        "lg": 9,
        "lk": 9,
        "lm": 10,
        "lb": 11,
        "ls": 12,
        "lt": 13,
        "lp": 14,
        "lh": 15,
        "m": 16,
        "b": 17,
        "bs": 18,
        "ps": 18,
        "s": 19,
        "ss": 20,
        "ng": 21,
        "j": 22,
        "ch": 23,
        "k": 24,
        "t": 25,
        "p": 26,
        "h": 27,
    }
)

# letters that can begin a vowel; a consonant in front of one of these starts the next syllable
VOWEL_LEADS = frozenset("aeiouwy")


def compose_syllable(initial: int, vowel: int, final: int = 0) -> str:
    return chr(HANGUL_BASE + (initial * VOWEL_COUNT + vowel) * FINAL_COUNT + final)


def _longest_first(trie: pygtrie.CharTrie, text: str, start: int):
    # prefixes() walks outwards from the shortest match; we want the longest one first
    return sorted(trie.prefixes(text[start : start + LONGEST_JAMO]), key=lambda item: len(item[0]), reverse=True)


def _parse_run(run: str) -> typing.Optional[str]:
    """Split a lowercase run of letters into syllables, or return None if it can't be done.

    Works backwards from the end of the run: ``steps[start]`` holds the first syllable
    that starts at ``start`` and still lets the rest of the run parse, along with where
    the rest begins.
    """
    steps: list[typing.Optional[tuple[str, int]]] = [None] * len(run)
    for start in range(len(run) - 1, -1, -1):
        steps[start] = _first_syllable(run, start, steps)
    if run and steps[0] is None:
        return None
    pieces = []
    start = 0
    while start < len(run):
        syllable, start = steps[start]
        pieces.append(syllable)
    return "".join(pieces)


def _first_syllable(run: str, start: int, steps) -> typing.Optional[tuple[str, int]]:
    initials = _longest_first(INITIALS, run, start) + [("", SILENT_INITIAL)]
    for initial_key, initial in initials:
        vowel_start = start + len(initial_key)
        for vowel_key, vowel in _longest_first(VOWELS, run, vowel_start):
            final_start = vowel_start + len(vowel_key)
            for final_key, final in _longest_first(FINALS, run, final_start) + [("", 0)]:
                rest_start = final_start + len(final_key)
                if final_key and rest_start < len(run) and run[rest_start] in VOWEL_LEADS:
                    continue
                if rest_start == len(run) or steps[rest_start] is not None:
                    return (compose_syllable(initial, vowel, final), rest_start)
    return None


def _tokenize(text: str) -> typing.Iterator[tuple[bool, str]]:
    """Yield (is_letter_run, chunk) pairs; escaped characters come out as literal chunks.

    A backslash at the very end has nothing to escape yet, so it is yielded on its own as
    an unfinished escape.
    """
    index = 0
    while index < len(text):
        ch = text[index]
        if ch == ESCAPE:
            yield (False, text[index : index + 2])
            index += 2
        elif ch.isascii() and ch.isalpha():
            end = index
            while end < len(text) and text[end].isascii() and text[end].isalpha():
                end += 1
            yield (True, text[index:end])
            index = end
        else:
            yield (False, ch)
            index += 1


def _literal(chunk: str) -> str:
    return chunk.removeprefix(ESCAPE) if len(chunk) > 1 else chunk


def convert(candidate: str) -> ConversionResult:
    pieces = []
    for is_run, chunk in _tokenize(candidate):
        if is_run:
            hangul = _parse_run(chunk.lower())
            if hangul is None:
                return Rejected()
            pieces.append(hangul)
        elif chunk == ESCAPE:
            return Rejected()
        else:
            pieces.append(_literal(chunk))
    return Converted(text="".join(pieces))


def _convert_run_greedily(run: str) -> str:
    pieces = []
    start = 0
    lowered = run.lower()
    while start < len(run):
        for end in range(len(run), start, -1):
            hangul = _parse_run(lowered[start:end])
            if hangul is not None:
                pieces.append(hangul)
                start = end
                break
        else:
            pieces.append(run[start])
            start += 1
    return "".join(pieces)


def convert_escaped(text: str) -> str:
    pieces = []
    for is_run, chunk in _tokenize(text):
        if is_run:
            pieces.append(_convert_run_greedily(chunk))
        elif chunk == ESCAPE:
            pieces.append(chunk)
        else:
            pieces.append(_literal(chunk))
    return "".join(pieces)
