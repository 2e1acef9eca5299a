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

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

## Valid register and access sizes in bytes.
VALID_SIZES = (1, 2, 4)

## Map from overlay size tag to size in bytes.
SIZE_TAGS = {
    'byte': 1,
    'char': 1,
    'short': 2,
    'int': 4,
    }

## Map from size in bytes to the gdb type used in a "set" command.
SIZE_TYPE_NAMES = {
    1: 'char',
    2: 'short',
    4: 'int',
    }

class Tier(Enum):
    """@brief Source of a definition.

    The enum values are ordered so that a higher value takes precedence on name lookup.
    """
    BUILTIN = 0
    OVERLAY = 1

@dataclass
class RegisterDefinition:
    """@brief Symbolic name for a memory-mapped register.

    The applicability list is only meaningful for built-in entries. Entries read from the overlay
    file have already been matched against the MCU when they are added to a database, so their
    applicability is None.
    """
    name: str
    address: int
    size: int = 4
    applicability: Optional[str] = None

    def __post_init__(self) -> None:
        assert self.size in VALID_SIZES, f"invalid size {self.size} for register {self.name}"

@dataclass(frozen=True)
class ScriptDefinition:
    """@brief Uncompiled script source.

    The body holds one instruction per line. Several definitions may share a name; which one is
    used depends on the tier and declaration order, see ScriptRegistry.
    """
    name: str
    applicability: str
    body: str
    tier: Tier = Tier.BUILTIN
    ## Line number of the first body line in the overlay file, for diagnostics.
    first_line: int = 1

    @property
    def lines(self):
        return self.body.splitlines()
