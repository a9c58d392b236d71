"""Fixed substitution table for the short-message compressor.

The position of a string in :data:`SUBSTITUTION_TABLE` is its wire code, so
the table must never be reordered. Entries are ASCII and ordered by rough
frequency in short conversational English.
"""

from __future__ import annotations

from typing import Tuple

LITERAL_MARKER = 0xFE
RESERVED_BYTE = 0xFF
MAX_LITERAL_RUN = 255

SUBSTITUTION_TABLE: Tuple[str, ...] = (
    # 0x00
    " ", "e", "t", "a", "o", "i", "n", "s",
    # 0x08
    "r", "h", "l", "d", "the", " the", "th", "he",
    # 0x10
    "in", "er", "an", "on", " a", "re", "nd", "en",
    # 0x18
    "at", "ed", "or", "es", "is", "it", "ou", "to",
    # 0x20
    "ing", " to", " is", " in", " it", " an", " on", "tion",
    # 0x28
    "er ", "ed ", "es ", " of", "of ", "and", " and", "for",
    # 0x30
    " for", "you", " you", "tha", "that", " tha", "hat", "all",
    # 0x38
    "are", " are", "not", " not", "have", " hav", "with", " wit",
    # 0x40
    "was", " was", "can", " can", "but", " but", "ght", "igh",
    # 0x48
    "ing ", "ent", "ion", "her", " her", "his", " his", "ould",
    # 0x50
    "ome", "out", " out", "thi", "this", " thi", "ver", "ever",
    # 0x58
    "ust", "just", " jus", "abo", "abou", "get", " get", "whe",
    # 0x60
    "when", " whe", " wh", "ome ", "here", " her", "ther", "from",
    # 0x68
    " fro", "ght ", "rig", "righ", "ow", "now", " now", "how",
    # 0x70
    " how", "kno", "know", " kno", "will", " wil", "ould ", "hey",
    # 0x78
    "they", " the ", "like", " lik", "goin", "going", " goi", "com",
    # 0x80
    "come", " com", "look", " loo", "wha", "what", " wha", "back",
    # 0x88
    " bac", "been", " bee", "good", " goo", "need", " nee", "help",
    # 0x90
    " hel", "way", " way", "ple", "leas", "ease", "than", "hank",
    # 0x98
    "ank", "here ", "wor", "work", " wor", "yeah", " yea", "sor",
    # 0xA0
    "sorry", " sor", "ple", "pleas", "lease", "okay", " oka", "may",
    # 0xA8
    "maybe", " may", "sure", " sur", "min", "minu", "minut", "think",
    # 0xB0
    " thin", " th", "don", "don'", "don't", " do", "ight", "night",
    # 0xB8
    " nig", "cal", "call", " cal", "morn", "morni", " mor", "see",
    # 0xC0
    " see", "day", " day", "today", " tod", "tomor", " tom", "free",
    # 0xC8
    " fre", "din", "dinn", "dinne", " din", "lunch", " lun", "meet",
    # 0xD0
    " mee", "time", " tim", "loc", "locat", " loc", "head", " hea",
    # 0xD8
    "wait", " wai", "safe", " saf", "leav", "leave", " lea", "around",
    # 0xE0
    " aro", "stay", " sta", "emer", "emerg", " eme", "copy", " cop",
    # 0xE8
    "rog", "roger", " rog", "over", " ove", "ack", " ack", "'s",
    # 0xF0
    "n't", "'m", "'re", "'ll", "'ve", "ly ", "ment", "ness",
    # 0xF8
    "able", "ful", "tion ", ". ", ", ", "? ",
)

SUBSTITUTION_BYTES: Tuple[bytes, ...] = tuple(entry.encode("ascii") for entry in SUBSTITUTION_TABLE)


__all__ = [
    "LITERAL_MARKER",
    "MAX_LITERAL_RUN",
    "RESERVED_BYTE",
    "SUBSTITUTION_BYTES",
    "SUBSTITUTION_TABLE",
]
