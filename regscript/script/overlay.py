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

"""@brief Reader for the user overlay file.

The overlay file is line oriented. A "#" starts a comment that runs to the end of the line, and
blank lines are ignored. Two kinds of records are supported:

@code
# Register definition. The size tag is optional and defaults to {int}.
define RCC_AHB1ENR [STM32F4*] = 0x40023830
define UART_LCR [LPC17xx] = {byte} 0x4000C00C

# Script definition.
define swo_device [STM32F4*,STM32F7*]
  RCC_AHB1ENR |= 0x02
  DBGMCU_CR |= 0x20
end
@endcode

This module only splits the file into records. Matching records against an MCU and compiling
script bodies is done by the DefinitionDatabase.
"""

from __future__ import annotations

import logging
import re
from dataclasses import (dataclass, field)
from typing import (Iterable, List, Optional)

from ..core import exceptions
from .definitions import (SIZE_TAGS, ScriptDefinition, Tier)
from .parser import parse_int_literal

LOG = logging.getLogger(__name__)

_REGISTER_RE = re.compile(r'^define\s+(?P<name>[A-Za-z_]\w*)\s*\[(?P<mcus>[^\]]*)\]\s*=\s*(?P<address>.*)$')
_SCRIPT_RE = re.compile(r'^define\s+(?P<name>[A-Za-z_]\w*)\s*\[(?P<mcus>[^\]]*)\]$')
_ADDRESS_RE = re.compile(r'^(?:\{(?P<tag>\w+)\}\s*)?(?P<value>[0-9]\w*)$')
_END_RE = re.compile(r'^end(\s|$)')

@dataclass
class OverlayRegister:
    """@brief Register definition read from the overlay file."""
    name: str
    applicability: str
    address: int
    size: int
    line: int = 0

@dataclass
class OverlayContents:
    """@brief All records of an overlay file, in file order, plus any malformed lines."""
    path: Optional[str] = None
    registers: List[OverlayRegister] = field(default_factory=list)
    scripts: List[ScriptDefinition] = field(default_factory=list)
    errors: List[exceptions.OverlayError] = field(default_factory=list)

class _OpenScript:
    def __init__(self, name: str, applicability: str, line: int) -> None:
        self.name = name
        self.applicability = applicability
        self.line = line
        self.body: List[str] = []

    def finish(self) -> ScriptDefinition:
        return ScriptDefinition(self.name, self.applicability, "\n".join(self.body),
                tier=Tier.OVERLAY, first_line=self.line + 1)

def _parse_address(text: str) -> tuple:
    match = _ADDRESS_RE.match(text.strip())
    if match is None:
        raise ValueError(f"invalid address '{text.strip()}'")
    tag = match.group('tag')
    if tag is None:
        size = 4
    elif tag in SIZE_TAGS:
        size = SIZE_TAGS[tag]
    else:
        raise ValueError(f"unknown size tag '{{{tag}}}'")
    return parse_int_literal(match.group('value')), size

def parse_overlay(lines: Iterable[str], path: Optional[str] = None) -> OverlayContents:
    """@brief Split overlay file lines into register and script records.

    Malformed lines are recorded in the `errors` list of the result and otherwise skipped.
    """
    contents = OverlayContents(path=path)
    current: Optional[_OpenScript] = None

    def error(message: str, lineno: int) -> None:
        err = exceptions.OverlayError(message, path=path, line=lineno)
        LOG.warning("Overlay file %s", err)
        contents.errors.append(err)

    lineno = 0
    for lineno, raw_line in enumerate(lines, start=1):
        line = raw_line.split('#', 1)[0].strip()

        if current is not None:
            if _END_RE.match(line):
                contents.scripts.append(current.finish())
                current = None
                continue
            script_match = _SCRIPT_RE.match(line)
            if script_match is None:
                # Blank lines are kept so that line numbers in compile errors stay accurate.
                current.body.append(line)
                continue
            error(f"script '{current.name}' has no 'end'", lineno)
            current = _OpenScript(script_match.group('name'), script_match.group('mcus'), lineno)
            continue

        if not line:
            continue

        register_match = _REGISTER_RE.match(line)
        if register_match is not None:
            try:
                address, size = _parse_address(register_match.group('address'))
            except ValueError as err:
                error(f"register '{register_match.group('name')}': {err}", lineno)
                continue
            contents.registers.append(OverlayRegister(register_match.group('name'),
                    register_match.group('mcus'), address, size, lineno))
            continue

        script_match = _SCRIPT_RE.match(line)
        if script_match is not None:
            current = _OpenScript(script_match.group('name'), script_match.group('mcus'), lineno)
            continue

        error(f"unrecognized line '{line}'", lineno)

    if current is not None:
        error(f"script '{current.name}' has no 'end'", lineno)

    return contents

def read_overlay(path: str) -> OverlayContents:
    """@brief Read and split an overlay file.

    An unreadable file is logged and treated as empty, so that loading continues with the built-in
    definitions only.
    """
    try:
        with open(path, 'r', encoding='utf-8') as overlay_file:
            LOG.debug("Loading overlay from: %s", path)
            lines = overlay_file.readlines()
    except (OSError, UnicodeDecodeError) as err:
        LOG.warning("Error attempting to read overlay file '%s': %s", path, err)
        return OverlayContents(path=path)
    return parse_overlay(lines, path)
