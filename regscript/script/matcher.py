# regscript
# Copyright (c) 2026 The regscript Authors
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""@brief MCU family name matching against applicability lists.

An applicability list is a comma-separated list of MCU family patterns, for example
`"STM32F03,STM32F05,STM32F2*"` or `"LPC8xx,LPC11xx*"`. Patterns support two wildcards:

- A lowercase `x` matches any single character at that position. Uppercase `X` is not a wildcard.
- A trailing `*` matches any remainder. `*` by itself matches every name.

Entries of the same length as the name are tried before any prefix wildcard, so a precise entry
takes precedence over a broader wildcard elsewhere in the list.
"""

import logging
from typing import (Iterator, List)

from ..core import exceptions

LOG = logging.getLogger(__name__)

## Wildcard character in a pattern that matches any single character.
ANY_CHAR = 'x'

## Suffix wildcard character.
ANY_SUFFIX = '*'

def strip_architecture(name: str) -> str:
    """@brief Remove a trailing core-architecture qualifier from an MCU family name.

    The qualifier is the last space-separated word when it starts with an "M" followed by a digit,
    such as "M0", "M4" or "M3/M4". Whitespace before the qualifier is removed as well.
    """
    separator = name.rfind(' ')
    if separator >= 0:
        qualifier = name[separator + 1:]
        if len(qualifier) >= 2 and qualifier[0] == 'M' and qualifier[1].isdigit():
            return name[:separator].rstrip()
    return name

def name_matches(pattern: str, name: str) -> bool:
    """@brief Compare a single pattern with a name of the same length.

    The comparison is case-insensitive, except that only a lowercase "x" in the pattern is a wildcard.
    """
    if len(pattern) != len(name):
        return False
    for p, n in zip(pattern, name):
        if p != ANY_CHAR and p.upper() != n.upper():
            return False
    return True

def split_list(pattern_list: str) -> List[str]:
    """@brief Split an applicability list into trimmed, non-empty entries."""
    return [entry.strip() for entry in pattern_list.split(',') if entry.strip()]

def _wildcard_prefixes(entries: List[str]) -> Iterator[str]:
    for entry in entries:
        position = entry.find(ANY_SUFFIX)
        if position < 0:
            continue
        if position != len(entry) - 1:
            raise exceptions.PatternError(f"wildcard must be the last character of '{entry}'")
        yield entry[:position]

def matches(name: str, pattern_list: str) -> bool:
    """@brief Test whether an MCU family name is selected by an applicability list.

    @param name MCU family name, optionally followed by an architecture qualifier ("LPC1114 M0").
        An architecture tag in brackets, such as "[M0]", is also accepted and is matched literally.
    @param pattern_list Comma-separated list of patterns.
    @return Boolean of whether any entry of the list matches.
    @exception PatternError The name is empty, or an entry has a "*" that is not its last character.
    """
    base = strip_architecture(name.strip())
    if not base:
        raise exceptions.PatternError("cannot match an empty MCU name")
    entries = split_list(pattern_list)

    # First pass: entries of exactly the same length.
    for entry in entries:
        if name_matches(entry, base):
            return True

    # Second pass: prefix wildcards.
    for prefix in _wildcard_prefixes(entries):
        if not prefix:
            return True
        if len(prefix) <= len(base) and name_matches(prefix, base[:len(prefix)]):
            return True

    return False

def matches_mcu_or_arch(mcu: str, arch: str, pattern_list: str) -> bool:
    """@brief Test whether an applicability list selects either an MCU or an architecture tag.

    The architecture is matched in its bracketed form, so `"[M0]"` in a list only selects Cortex-M0
    cores. An empty architecture never matches.
    """
    if matches(mcu, pattern_list):
        return True
    return bool(arch) and matches(f"[{arch}]", pattern_list)
